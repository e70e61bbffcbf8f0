"""
Puerto de salida: Escritor de tablas planas.

El dominio produce TablaPlana (cabecera + filas de Decimal o texto) y no
sabe en qué formato acaban. Hoy es Excel; el formato de moneda y de
porcentaje es cosa del escritor.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from feria_control.domain.models.informe import TablaPlana


class TableWriter(ABC):
    """Interfaz para escribir tablas planas en un archivo."""

    @abstractmethod
    def write(self, tablas: Sequence[TablaPlana], output_path: Path) -> Path:
        """Escribe las tablas en un archivo, una hoja por tabla.

        Args:
            tablas: Tablas a escribir, en el orden de las hojas.
            output_path: Ruta donde crear el archivo.

        Returns:
            Ruta real del archivo creado (puede diferir si se añadió extensión).

        Raises:
            ExportError: Si no hay tablas o falla la escritura.
        """
        ...

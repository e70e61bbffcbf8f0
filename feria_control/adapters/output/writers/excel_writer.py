"""
Adaptador de salida: Escritor de Excel.

Escribe cada TablaPlana en su propia hoja con pandas + xlsxwriter.

Las celdas llegan como Decimal o texto. Aquí se decide el formato:
- Importes: 2 decimales con separador de miles y símbolo €.
- Columnas de porcentaje (cabecera que empieza por '%'): 2 decimales.
- La primera columna (partida / feria) es texto y se ensancha.
"""

from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path

import pandas as pd

from feria_control.domain.exceptions import ExportError
from feria_control.domain.models.informe import TablaPlana
from feria_control.domain.ports.table_writer import TableWriter

_MAX_NOMBRE_HOJA = 31
"""Límite de Excel para el nombre de una hoja."""


class ExcelWriter(TableWriter):
    """Genera archivos Excel con una hoja por tabla."""

    def write(self, tablas: Sequence[TablaPlana], output_path: Path) -> Path:
        """Escribe las tablas a un .xlsx.

        Args:
            tablas: Tablas a escribir, en el orden de las hojas.
            output_path: Ruta donde crear el archivo. Si no termina en
                        .xlsx, se le agrega la extensión.

        Returns:
            Ruta del archivo creado.
        """
        if not tablas:
            raise ExportError(str(output_path), "No hay tablas para exportar")

        # Asegurar extensión .xlsx
        if output_path.suffix.lower() != ".xlsx":
            output_path = output_path.with_suffix(".xlsx")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self._escribir_excel(tablas, output_path)
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(str(output_path), str(e)) from e

        return output_path

    # =================================================================
    # MÉTODOS PRIVADOS
    # =================================================================

    def _escribir_excel(self, tablas: Sequence[TablaPlana], output_path: Path) -> None:
        nombres_usados: set[str] = set()

        with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
            workbook = writer.book
            money_format = workbook.add_format({"num_format": "#,##0.00 €"})
            pct_format = workbook.add_format({"num_format": "0.00"})
            bold_format = workbook.add_format({"bold": True})

            for tabla in tablas:
                nombre = self._nombre_hoja(tabla.nombre_hoja, nombres_usados)
                df = self._to_dataframe(tabla)
                df.to_excel(writer, index=False, sheet_name=nombre)

                ws = writer.sheets[nombre]
                ws.set_column(0, 0, 28, bold_format)
                for idx, columna in enumerate(tabla.columnas[1:], start=1):
                    formato = pct_format if columna.startswith("%") else money_format
                    ws.set_column(idx, idx, max(14, len(columna) + 2), formato)

    def _to_dataframe(self, tabla: TablaPlana) -> pd.DataFrame:
        """Convierte la tabla a DataFrame, con los Decimal como float.

        Excel no tiene tipo decimal: las celdas numéricas se escriben como
        float y el redondeo visible lo pone el formato de la columna.
        """
        filas = [[self._celda(v) for v in fila] for fila in tabla.filas]
        return pd.DataFrame(filas, columns=list(tabla.columnas))

    @staticmethod
    def _celda(valor: object) -> object:
        if isinstance(valor, Decimal):
            return float(valor)
        return valor

    @staticmethod
    def _nombre_hoja(nombre: str, usados: set[str]) -> str:
        """Nombre de hoja válido y único dentro del libro."""
        for caracter in "[]:*?/\\":
            nombre = nombre.replace(caracter, " ")
        base = (nombre.strip() or "Hoja")[:_MAX_NOMBRE_HOJA]

        candidato = base
        sufijo = 2
        while candidato.lower() in usados:
            marca = f" ({sufijo})"
            candidato = base[: _MAX_NOMBRE_HOJA - len(marca)] + marca
            sufijo += 1
        usados.add(candidato.lower())
        return candidato

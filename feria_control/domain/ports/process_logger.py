"""
Puerto de salida: Bitácora de operaciones (Process Logger).

Define el contrato para registrar los eventos de negocio del control de
ferias: carga y guardado del dataset, imputaciones, avisos que requieren
confirmación, cambios en ferias y exportaciones.

El dominio solo conoce estos EVENTOS ("se guardó un gasto de -300 € en
MONTAJE"), no los niveles ni los handlers de `logging`. La implementación
de consola usa `logging` por debajo; en los tests se usa una que acumula
los eventos en memoria.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from feria_control.domain.models.movimiento_real import MovimientoReal


class ProcessLogger(ABC):
    """Interfaz para la bitácora de operaciones."""

    # --- Dataset ---

    @abstractmethod
    def log_dataset_loaded(self, num_ferias: int) -> None:
        """Registra que se cargó el dataset."""
        ...

    @abstractmethod
    def log_dataset_saved(self, num_ferias: int) -> None:
        """Registra que se guardó el dataset completo."""
        ...

    # --- Imputación ---

    @abstractmethod
    def log_movimiento_saved(self, feria_id: str, movimiento: MovimientoReal, editado: bool) -> None:
        """Registra que se guardó un movimiento real.

        Args:
            feria_id: Feria a la que pertenece el movimiento.
            movimiento: Movimiento guardado.
            editado: True si reemplazó a uno existente; False si es un alta.
        """
        ...

    @abstractmethod
    def log_confirmation_required(self, feria_id: str, advertencias: list[str]) -> None:
        """Registra que una imputación quedó pendiente de confirmación.

        Se usa cuando el reparto no cuadra o el signo del importe no es el
        habitual para su tipo. No se guarda nada hasta que el operador
        confirme.

        Args:
            feria_id: Feria de la imputación.
            advertencias: Descripción legible de cada aviso.
        """
        ...

    # --- Ferias ---

    @abstractmethod
    def log_feria_changed(self, feria_id: str, accion: str) -> None:
        """Registra un cambio en una feria.

        Args:
            feria_id: Feria modificada.
            accion: Qué se hizo. Ejemplo: "creada", "archivada",
                "presupuestos actualizados".
        """
        ...

    # --- Exportación ---

    @abstractmethod
    def log_export_complete(self, output_path: Path, num_tablas: int) -> None:
        """Registra que se generó un archivo de exportación."""
        ...

    @abstractmethod
    def log_error(self, contexto: str, error: Exception) -> None:
        """Registra un error durante una operación.

        Se espera que la implementación capture el traceback completo
        para facilitar debugging.
        """
        ...

    # --- Resumen ---

    @abstractmethod
    def get_summary(self) -> dict:
        """Devuelve un resumen de las operaciones registradas.

        Returns:
            Diccionario con métricas:
            {
                'movimientos_creados': int,
                'movimientos_editados': int,
                'confirmaciones_pendientes': int,
                'ferias_modificadas': int,
                'exportaciones': int,
                'errores': List[dict],  # [{contexto, error}]
            }
        """
        ...

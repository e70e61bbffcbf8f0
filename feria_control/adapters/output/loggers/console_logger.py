"""
Adaptador de salida: Logger a consola.

Implementación de ProcessLogger sobre el módulo `logging`: cada evento de
negocio se traduce a un mensaje con su nivel (INFO para operaciones,
WARNING para confirmaciones pendientes, ERROR con traceback para fallos).
Además lleva contadores para el resumen final.

El formato y el destino de los mensajes los configura
`infrastructure.logging_setup.setup_logging`.
"""

import logging
from pathlib import Path

from feria_control.domain.models.movimiento_real import MovimientoReal
from feria_control.domain.ports.process_logger import ProcessLogger
from feria_control.domain.shared.money import format_money

logger = logging.getLogger(__name__)


class ConsoleLogger(ProcessLogger):
    """Logger que registra los eventos de negocio con `logging`."""

    def __init__(self) -> None:
        self._movimientos_creados: int = 0
        self._movimientos_editados: int = 0
        self._confirmaciones_pendientes: int = 0
        self._ferias_modificadas: int = 0
        self._exportaciones: int = 0
        self._errores: list[dict] = []

    # --- Dataset ---

    def log_dataset_loaded(self, num_ferias: int) -> None:
        logger.info("Dataset cargado: %d ferias", num_ferias)

    def log_dataset_saved(self, num_ferias: int) -> None:
        logger.info("Dataset guardado: %d ferias", num_ferias)

    # --- Imputación ---

    def log_movimiento_saved(self, feria_id: str, movimiento: MovimientoReal, editado: bool) -> None:
        if editado:
            self._movimientos_editados += 1
        else:
            self._movimientos_creados += 1
        logger.info(
            "%s %s en %s: %s %s, %s repartido entre %d clientes",
            "Editado" if editado else "Imputado",
            movimiento.id,
            feria_id,
            movimiento.tipo.value,
            movimiento.categoria,
            format_money(movimiento.importe_total),
            len(movimiento.reparto),
        )

    def log_confirmation_required(self, feria_id: str, advertencias: list[str]) -> None:
        self._confirmaciones_pendientes += 1
        for aviso in advertencias:
            logger.warning("Pendiente de confirmación en %s: %s", feria_id, aviso)

    # --- Ferias ---

    def log_feria_changed(self, feria_id: str, accion: str) -> None:
        self._ferias_modificadas += 1
        logger.info("Feria %s: %s", feria_id, accion)

    # --- Exportación ---

    def log_export_complete(self, output_path: Path, num_tablas: int) -> None:
        self._exportaciones += 1
        logger.info("Exportado %s (%d hojas)", output_path, num_tablas)

    def log_error(self, contexto: str, error: Exception) -> None:
        self._errores.append({"contexto": contexto, "error": str(error)})
        logger.error("Error en %s: %s", contexto, error, exc_info=error)

    # --- Resumen ---

    def get_summary(self) -> dict:
        return {
            "movimientos_creados": self._movimientos_creados,
            "movimientos_editados": self._movimientos_editados,
            "confirmaciones_pendientes": self._confirmaciones_pendientes,
            "ferias_modificadas": self._ferias_modificadas,
            "exportaciones": self._exportaciones,
            "errores": self._errores,
        }

    def print_summary(self) -> None:
        """Registra el resumen final de la ejecución."""
        logger.info("=" * 60)
        logger.info("RESUMEN")
        logger.info("  Movimientos imputados:      %d", self._movimientos_creados)
        logger.info("  Movimientos editados:       %d", self._movimientos_editados)
        logger.info("  Pendientes de confirmación: %d", self._confirmaciones_pendientes)
        logger.info("  Cambios en ferias:          %d", self._ferias_modificadas)
        logger.info("  Exportaciones:              %d", self._exportaciones)
        for err in self._errores:
            logger.error("  %s: %s", err["contexto"], err["error"])
        logger.info("=" * 60)

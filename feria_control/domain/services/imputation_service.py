"""
Servicio de dominio: Imputación de movimientos reales.

Orquesta el ciclo de vida de una factura o venta:
1. Clasificar: tipo (gasto/venta) y partida.
2. Importe: se lee del formulario; un texto ilegible cuenta como 0.
3. Repartir: motor de reparto (proporcional, manual o venta a un cliente).
4. Avisar: reparto descuadrado o signo no habitual para el tipo.
5. Guardar: alta, o edición en sitio si el movimiento ya existía.

Los avisos NO bloquean: se devuelven al operador y, si confirma, el
movimiento se guarda tal cual. Nunca se corrige el reparto automáticamente.
"""

import random
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from feria_control.domain.exceptions import FeriaNoEncontradaError, ImputacionInvalidaError
from feria_control.domain.models.dataset import Dataset
from feria_control.domain.models.feria import Feria
from feria_control.domain.models.movimiento_real import ModoReparto, MovimientoReal, TipoMovimiento
from feria_control.domain.models.reparto import ResultadoReparto
from feria_control.domain.ports.dataset_storage import DatasetStorage
from feria_control.domain.ports.process_logger import ProcessLogger
from feria_control.domain.services import distribution_engine
from feria_control.domain.shared.categories import CATEGORIA_INGRESO
from feria_control.domain.shared.money import CERO, format_money, parse_money_safe

_ALFABETO_ID = string.ascii_lowercase + string.digits


class Advertencia(str, Enum):
    """Avisos confirmables de una imputación."""

    GASTO_POSITIVO = "GASTO_POSITIVO"
    """Gasto con importe positivo: se tratará como devolución de proveedor."""

    VENTA_NEGATIVA = "VENTA_NEGATIVA"
    """Venta con importe negativo: se tratará como abono."""

    REPARTO_DESCUADRADO = "REPARTO_DESCUADRADO"
    """La suma repartida no coincide con el importe total (tolerancia 0.02)."""


@dataclass(frozen=True)
class SolicitudImputacion:
    """Datos del formulario de imputación."""

    feria_id: str
    tipo: TipoMovimiento
    categoria: str
    importe_total: object
    """Importe con signo, tal como llega (texto o número)."""

    seleccionados: tuple[str, ...]
    modo: ModoReparto = ModoReparto.PROPORCIONAL
    valores_manuales: dict[str, object] = field(default_factory=dict)
    fecha: date | None = None
    proveedor: str = ""
    concepto: str = ""
    movimiento_id: str | None = None
    """Id del movimiento a editar. None = alta de un movimiento nuevo."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tipo", TipoMovimiento(self.tipo))
        object.__setattr__(self, "modo", ModoReparto(self.modo))
        object.__setattr__(self, "seleccionados", tuple(self.seleccionados))


@dataclass(frozen=True)
class Previsualizacion:
    """Reparto calculado y avisos, antes de guardar."""

    solicitud: SolicitudImputacion
    importe: Decimal
    reparto: ResultadoReparto
    advertencias: tuple[Advertencia, ...]

    @property
    def requiere_confirmacion(self) -> bool:
        return bool(self.advertencias)

    def describir_advertencias(self) -> list[str]:
        """Texto legible de cada aviso, para mostrar al operador."""
        textos = {
            Advertencia.GASTO_POSITIVO: (
                f"El gasto es positivo ({format_money(self.importe)}): "
                "se registrará como devolución de proveedor"
            ),
            Advertencia.VENTA_NEGATIVA: (
                f"La venta es negativa ({format_money(self.importe)}): "
                "se registrará como abono"
            ),
            Advertencia.REPARTO_DESCUADRADO: (
                f"El reparto no cuadra: total {format_money(self.importe)}, "
                f"repartido {format_money(self.reparto.total_repartido)}, "
                f"diferencia {format_money(self.reparto.diferencia)}"
            ),
        }
        return [textos[a] for a in self.advertencias]


@dataclass(frozen=True)
class ResultadoImputacion:
    """Resultado de intentar guardar una imputación."""

    previsualizacion: Previsualizacion
    movimiento: MovimientoReal | None = None
    editado: bool = False

    @property
    def guardado(self) -> bool:
        return self.movimiento is not None


def generate_movement_id(ahora: datetime) -> str:
    """Id de movimiento: 'EXP-<milisegundos>-<9 caracteres aleatorios>'."""
    sufijo = "".join(random.choices(_ALFABETO_ID, k=9))
    return f"EXP-{int(ahora.timestamp() * 1000)}-{sufijo}"


def check_warnings(tipo: TipoMovimiento, importe: Decimal, reparto: ResultadoReparto) -> tuple[Advertencia, ...]:
    """Avisos confirmables para un importe y su reparto."""
    advertencias: list[Advertencia] = []
    if tipo is TipoMovimiento.GASTO and importe > CERO:
        advertencias.append(Advertencia.GASTO_POSITIVO)
    if tipo is TipoMovimiento.INGRESO and importe < CERO:
        advertencias.append(Advertencia.VENTA_NEGATIVA)
    if not reparto.cuadrado:
        advertencias.append(Advertencia.REPARTO_DESCUADRADO)
    return tuple(advertencias)


class ImputationService:
    """Imputa gastos y ventas reales a los clientes de una feria.

    Recibe sus dependencias por constructor. `now` se inyecta para que los
    tests controlen las marcas de tiempo.
    """

    def __init__(
        self,
        storage: DatasetStorage,
        logger: ProcessLogger,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._logger = logger
        self._now = now

    def preview(self, solicitud: SolicitudImputacion, dataset: Dataset | None = None) -> Previsualizacion:
        """Calcula el reparto y los avisos sin guardar nada.

        Raises:
            FeriaNoEncontradaError: Si la feria no existe.
            ImputacionInvalidaError: Si falta el importe o no hay clientes
                seleccionados.
        """
        if dataset is None:
            dataset = self._storage.load()
        feria = self._feria(dataset, solicitud.feria_id)

        if solicitud.importe_total is None or (
            isinstance(solicitud.importe_total, str) and not solicitud.importe_total.strip()
        ):
            raise ImputacionInvalidaError("no se indicó el importe")
        if not solicitud.seleccionados:
            raise ImputacionInvalidaError("no hay ningún cliente seleccionado")

        importe = parse_money_safe(solicitud.importe_total)
        reparto = distribution_engine.distribute(
            clientes=feria.clientes,
            categoria=solicitud.categoria,
            importe_total=importe,
            tipo=solicitud.tipo,
            seleccionados=solicitud.seleccionados,
            modo=solicitud.modo,
            valores_manuales=solicitud.valores_manuales,
        )
        return Previsualizacion(
            solicitud=solicitud,
            importe=importe,
            reparto=reparto,
            advertencias=check_warnings(solicitud.tipo, importe, reparto),
        )

    def save(self, solicitud: SolicitudImputacion, confirmado: bool = False) -> ResultadoImputacion:
        """Guarda la imputación si no hay avisos o si el operador confirmó.

        Con avisos y sin confirmar, no se guarda nada: se devuelve la
        previsualización para que el operador decida.

        Raises:
            FeriaNoEncontradaError: Si la feria no existe.
            ImputacionInvalidaError: Si la solicitud no es accionable.
            PersistenciaError: Si falla la carga o el guardado.
        """
        dataset = self._storage.load()
        previa = self.preview(solicitud, dataset)

        if previa.requiere_confirmacion and not confirmado:
            self._logger.log_confirmation_required(solicitud.feria_id, previa.describir_advertencias())
            return ResultadoImputacion(previsualizacion=previa)

        feria = self._feria(dataset, solicitud.feria_id)
        movimiento = self._construir_movimiento(feria, previa)
        editado = feria.registrar_movimiento(movimiento)

        self._guardar(dataset)
        self._logger.log_movimiento_saved(feria.id, movimiento, editado)
        return ResultadoImputacion(previsualizacion=previa, movimiento=movimiento, editado=editado)

    def list_expenses(self, feria_id: str) -> list[MovimientoReal]:
        """Movimientos reales de una feria. Feria desconocida: lista vacía."""
        feria = self._storage.load().buscar_feria(feria_id)
        return list(feria.movimientos) if feria is not None else []

    def _guardar(self, dataset: Dataset) -> None:
        self._storage.save(dataset)
        self._logger.log_dataset_saved(len(dataset.ferias))

    def _feria(self, dataset: Dataset, feria_id: str) -> Feria:
        feria = dataset.buscar_feria(feria_id)
        if feria is None:
            raise FeriaNoEncontradaError(feria_id)
        return feria

    def _construir_movimiento(self, feria: Feria, previa: Previsualizacion) -> MovimientoReal:
        solicitud = previa.solicitud
        ahora = self._now()

        existente = feria.buscar_movimiento(solicitud.movimiento_id) if solicitud.movimiento_id else None
        if existente is not None:
            movimiento_id = existente.id
            creado_en = existente.creado_en
            actualizado_en: datetime | None = ahora
        else:
            movimiento_id = solicitud.movimiento_id or generate_movement_id(ahora)
            creado_en = ahora
            actualizado_en = None

        return MovimientoReal(
            id=movimiento_id,
            tipo=solicitud.tipo,
            categoria=CATEGORIA_INGRESO if solicitud.tipo is TipoMovimiento.INGRESO else solicitud.categoria,
            importe_total=previa.importe,
            reparto=previa.reparto.reparto,
            modo_reparto=solicitud.modo,
            fecha=solicitud.fecha,
            proveedor=solicitud.proveedor if solicitud.tipo is TipoMovimiento.GASTO else "",
            concepto=solicitud.concepto,
            creado_en=creado_en,
            actualizado_en=actualizado_en,
        )

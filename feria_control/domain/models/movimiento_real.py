"""
Modelo de dominio: Movimiento real (factura de gasto o venta).

Un MovimientoReal es una operación ya ocurrida: una factura de proveedor
(GASTO) o una venta (INGRESO), con su reparto entre clientes de la feria.

Convenciones de signo:
- Un gasto se registra normalmente en NEGATIVO; un gasto positivo es una
  devolución de proveedor.
- Una venta se registra normalmente en POSITIVO; una venta negativa es un
  abono.
El signo no decide el tipo: lo decide `tipo`. Un signo inesperado solo
genera una advertencia confirmable en la imputación.

Para agregar, cada parte del reparto se convierte en su "importe efectivo":
el coste (-v) si es un gasto, el ingreso (v) si es una venta.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from feria_control.domain.shared.categories import (
    CATEGORIA_DEFECTO,
    CATEGORIA_INGRESO,
    normalize_category,
)
from feria_control.domain.shared.money import CERO, is_balanced


class TipoMovimiento(str, Enum):
    """Tipo de movimiento. El valor es el que se guarda en el dataset."""

    GASTO = "EXPENSE"
    INGRESO = "INCOME"


class ModoReparto(str, Enum):
    """Modo en que se repartió el importe entre clientes."""

    PROPORCIONAL = "PROPORTIONAL"
    MANUAL = "MANUAL"


@dataclass(frozen=True)
class MovimientoReal:
    """Gasto o venta real imputado a uno o varios clientes de una feria."""

    # --- Campos obligatorios ---

    id: str
    tipo: TipoMovimiento
    categoria: str
    importe_total: Decimal
    """Importe con signo. Ver convenciones de signo en el módulo."""

    reparto: dict[str, Decimal]
    """cliente_id → importe asignado. La suma debería cuadrar con
    importe_total (tolerancia 0.02), pero no es obligatorio."""

    modo_reparto: ModoReparto = ModoReparto.PROPORCIONAL

    # --- Campos descriptivos ---

    fecha: date | None = None
    proveedor: str = ""
    """Solo para gastos. Las ventas lo llevan vacío."""

    concepto: str = ""
    creado_en: datetime | None = None
    actualizado_en: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tipo", TipoMovimiento(self.tipo))
        object.__setattr__(self, "modo_reparto", ModoReparto(self.modo_reparto))
        defecto = CATEGORIA_INGRESO if self.tipo is TipoMovimiento.INGRESO else CATEGORIA_DEFECTO
        object.__setattr__(self, "categoria", normalize_category(self.categoria, defecto))
        object.__setattr__(self, "reparto", dict(self.reparto))

        if not self.id:
            raise ValueError("El id del movimiento no puede estar vacío")
        if self.tipo is TipoMovimiento.INGRESO and len(self.reparto) > 1:
            raise ValueError(
                f"Una venta se atribuye como mucho a un cliente; "
                f"reparto recibido con {len(self.reparto)} clientes"
            )

    # --- Propiedades derivadas ---

    @property
    def es_ingreso(self) -> bool:
        return self.tipo is TipoMovimiento.INGRESO

    @property
    def total_repartido(self) -> Decimal:
        return sum(self.reparto.values(), CERO)

    @property
    def diferencia(self) -> Decimal:
        """importe_total - total_repartido. Positiva si falta por repartir."""
        return self.importe_total - self.total_repartido

    @property
    def cuadrado(self) -> bool:
        return is_balanced(self.importe_total, self.total_repartido)

    def importe_para(self, cliente_id: str) -> Decimal:
        """Importe asignado a un cliente. 0 si el cliente no participa."""
        return self.reparto.get(cliente_id, CERO)

    def importe_efectivo_para(self, cliente_id: str) -> Decimal:
        """Aportación del movimiento al cliente en términos de negocio.

        Ventas: el importe asignado tal cual (ingreso).
        Gastos: el importe asignado con el signo invertido (coste). Un gasto
        de -300 aporta 300 de coste; una devolución de +50 aporta -50.
        """
        importe = self.importe_para(cliente_id)
        return importe if self.es_ingreso else CERO - importe

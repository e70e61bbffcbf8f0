"""
Modelo de dominio: Resultado de un reparto.

Lo produce el motor de reparto y lo consume la imputación: contiene el
reparto calculado y los pesos usados, para poder mostrarlos al operador
antes de confirmar.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from feria_control.domain.models.movimiento_real import ModoReparto, TipoMovimiento
from feria_control.domain.shared.money import CERO, is_balanced


@dataclass(frozen=True)
class PesosCategoria:
    """Primera pasada del reparto proporcional: pesos de TODOS los clientes."""

    pesos: dict[str, Decimal]
    """cliente_id → peso. Con reparto igualitario, todos pesan 1."""

    total_presupuesto: Decimal
    """Suma de los gastos estimados de la feria en la partida."""

    @property
    def igualitario(self) -> bool:
        """True si ningún cliente presupuestó la partida (todos pesan 1)."""
        return self.total_presupuesto == CERO

    def peso_de(self, cliente_id: str) -> Decimal:
        return self.pesos.get(cliente_id, CERO)


@dataclass(frozen=True)
class ResultadoReparto:
    """Reparto de un importe total entre clientes."""

    importe_total: Decimal
    tipo: TipoMovimiento
    modo: ModoReparto
    reparto: dict[str, Decimal] = field(default_factory=dict)
    pesos: PesosCategoria | None = None
    """Solo en reparto proporcional de gastos."""

    @property
    def total_repartido(self) -> Decimal:
        return sum(self.reparto.values(), CERO)

    @property
    def diferencia(self) -> Decimal:
        return self.importe_total - self.total_repartido

    @property
    def cuadrado(self) -> bool:
        """|importe_total - total_repartido| < 0.02."""
        return is_balanced(self.importe_total, self.total_repartido)

    @property
    def vacio(self) -> bool:
        return not self.reparto

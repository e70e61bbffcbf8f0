"""
Modelo de dominio: Cliente y su presupuesto.

Un cliente pertenece a exactamente una feria y lleva su propio presupuesto:
partidas de ingreso previstas (ventas) y partidas de gasto estimadas.

El presupuesto es la base del reparto proporcional: el peso de un cliente
en una partida es la suma de sus gastos estimados en esa partida.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from feria_control.domain.shared.categories import (
    CATEGORIA_DEFECTO,
    CATEGORIA_INGRESO,
    normalize_category,
)
from feria_control.domain.shared.money import CERO

ESTADO_ARCHIVADO = "Archived"


@dataclass(frozen=True)
class PartidaIngreso:
    """Línea de ingreso previsto (normalmente una venta)."""

    descripcion: str
    importe: Decimal
    categoria: str = CATEGORIA_INGRESO
    id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "categoria", normalize_category(self.categoria, CATEGORIA_INGRESO))
        if self.importe < CERO:
            raise ValueError(f"El importe previsto no puede ser negativo: {self.importe}")


@dataclass(frozen=True)
class PartidaGasto:
    """Línea de gasto estimado en una partida."""

    categoria: str
    """Partida del gasto. Se normaliza a mayúsculas; vacía cae en OTROS.
    Puede ser una partida libre fuera de la lista estándar."""

    descripcion: str
    estimado: Decimal
    """Coste previsto. Siempre >= 0: el signo de coste lo pone la agregación."""

    tipo: str = "Previsión"
    id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "categoria", normalize_category(self.categoria, CATEGORIA_DEFECTO))
        if self.estimado < CERO:
            raise ValueError(f"El gasto estimado no puede ser negativo: {self.estimado}")


@dataclass(frozen=True)
class Presupuesto:
    """Ingresos y gastos previstos de un cliente."""

    ingresos: tuple[PartidaIngreso, ...] = ()
    gastos: tuple[PartidaGasto, ...] = ()

    def __post_init__(self) -> None:
        # Permite construir con listas sin perder la inmutabilidad
        object.__setattr__(self, "ingresos", tuple(self.ingresos))
        object.__setattr__(self, "gastos", tuple(self.gastos))

    def estimado_en(self, categoria: str) -> Decimal:
        """Suma de los gastos estimados en una partida. 0 si no hay ninguno."""
        categoria = normalize_category(categoria)
        return sum((g.estimado for g in self.gastos if g.categoria == categoria), CERO)

    def importe_categoria(self, categoria: str) -> Decimal:
        """Importe presupuestado en una partida.

        Para la partida de ingresos (VENTA) son los ingresos previstos;
        para cualquier otra, los gastos estimados.
        """
        categoria = normalize_category(categoria)
        if categoria == CATEGORIA_INGRESO:
            return self.total_ingresos
        return self.estimado_en(categoria)

    @property
    def total_ingresos(self) -> Decimal:
        return sum((i.importe for i in self.ingresos), CERO)

    @property
    def total_gastos(self) -> Decimal:
        return sum((g.estimado for g in self.gastos), CERO)

    @property
    def categorias(self) -> list[str]:
        """Partidas de gasto presentes en el presupuesto, sin repetir."""
        return list(dict.fromkeys(g.categoria for g in self.gastos))


@dataclass(frozen=True)
class Cliente:
    """Cliente facturado dentro de una feria."""

    id: str
    nombre: str
    estado: str = "Active"
    presupuesto: Presupuesto = field(default_factory=Presupuesto)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("El id del cliente no puede estar vacío")

    @property
    def archivado(self) -> bool:
        return self.estado == ESTADO_ARCHIVADO

"""
Modelos de dominio: filas y tablas de informes.

Son las salidas del agregador y del constructor de informes. Todos los
valores numéricos son Decimal sin formatear: el símbolo de moneda y el
formato regional los pone el escritor de salida.

Porcentajes: siempre en escala 0-100 (80 significa 80 %).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from feria_control.domain.models.dataset import ClienteEnFeria
from feria_control.domain.models.movimiento_real import MovimientoReal
from feria_control.domain.shared.categories import CATEGORIA_INGRESO, is_standard_category
from feria_control.domain.shared.money import CERO


class ModoInforme(str, Enum):
    """Alcance de un informe."""

    FERIA = "FERIA"
    """Una feria: añade columnas TOTAL y % y la fila % BENEFICIO."""

    GLOBAL = "GLOBAL"
    """Comparativa entre clientes de varias ferias, sin columna total."""


class FuenteMatriz(str, Enum):
    """Origen de los importes de la matriz de informe."""

    PRESUPUESTO = "BUDGET"
    REAL = "ACTUAL"


@dataclass(frozen=True)
class FilaCategoria:
    """Presupuesto frente a real de una partida para un filtro de clientes."""

    categoria: str
    presupuesto: Decimal
    real: Decimal

    @property
    def es_estandar(self) -> bool:
        return is_standard_category(self.categoria)

    @property
    def vacia(self) -> bool:
        return self.presupuesto == CERO and self.real == CERO


@dataclass(frozen=True)
class FilaComparativa:
    """Fila de la comparativa presupuesto / valor ganado / coste real."""

    categoria: str
    presupuesto: Decimal
    pct_ejecucion: Decimal
    valor_avance: Decimal
    """Valor ganado: presupuesto * pct_ejecucion / 100."""

    coste_real: Decimal
    desviacion: Decimal
    """valor_avance - coste_real. Positiva = ahorro; negativa = desvío."""

    pct_gastado: Decimal
    """coste_real / presupuesto * 100; 0 si el presupuesto es 0."""

    @property
    def es_ahorro(self) -> bool:
        return self.desviacion >= CERO


@dataclass(frozen=True)
class Comparativa:
    """Comparativa completa: filas mostradas más fila de totales."""

    filas: tuple[FilaComparativa, ...]

    @property
    def total_presupuesto(self) -> Decimal:
        return sum((f.presupuesto for f in self.filas), CERO)

    @property
    def total_valor_avance(self) -> Decimal:
        return sum((f.valor_avance for f in self.filas), CERO)

    @property
    def total_coste_real(self) -> Decimal:
        return sum((f.coste_real for f in self.filas), CERO)

    @property
    def total_desviacion(self) -> Decimal:
        return sum((f.desviacion for f in self.filas), CERO)

    @property
    def pct_gastado_total(self) -> Decimal:
        if self.total_presupuesto == CERO:
            return CERO
        return self.total_coste_real / self.total_presupuesto * 100


@dataclass(frozen=True)
class ResumenCliente:
    """Totales de un cliente: gastos, ingresos, beneficio y margen."""

    total_gastos: Decimal
    total_ingresos: Decimal

    @property
    def beneficio(self) -> Decimal:
        return self.total_ingresos - self.total_gastos

    @property
    def margen_pct(self) -> Decimal:
        """beneficio / ingresos * 100; 0 si no hay ingresos."""
        if self.total_ingresos == CERO:
            return CERO
        return self.beneficio / self.total_ingresos * 100


@dataclass(frozen=True)
class FilaMatriz:
    """Fila de partida de la matriz: un importe por columna de cliente."""

    categoria: str
    valores: dict[str, Decimal]
    """ClienteEnFeria.clave → importe."""

    def valor(self, clave: str) -> Decimal:
        return self.valores.get(clave, CERO)

    @property
    def total(self) -> Decimal:
        return sum(self.valores.values(), CERO)


@dataclass(frozen=True)
class MatrizInforme:
    """Matriz partidas x clientes, con filas de total y beneficio.

    En modo FERIA las filas llevan además columna TOTAL y columna %
    (peso de la fila sobre el total de gastos); en modo GLOBAL no.
    """

    modo: ModoInforme
    fuente: FuenteMatriz
    columnas: tuple[ClienteEnFeria, ...]
    filas: tuple[FilaMatriz, ...]
    ingresos: dict[str, Decimal] = field(default_factory=dict)
    """ClienteEnFeria.clave → ingresos (presupuestados o reales)."""

    def total_gastos(self, clave: str) -> Decimal:
        """Fila TOTAL: suma de las partidas de gasto de una columna."""
        return sum((f.valor(clave) for f in self.filas_gasto), CERO)

    def beneficio(self, clave: str) -> Decimal:
        return self.ingresos.get(clave, CERO) - self.total_gastos(clave)

    def pct_beneficio(self, clave: str) -> Decimal:
        ingresos = self.ingresos.get(clave, CERO)
        if ingresos == CERO:
            return CERO
        return self.beneficio(clave) / ingresos * 100

    @property
    def filas_gasto(self) -> list[FilaMatriz]:
        return [f for f in self.filas if f.categoria != CATEGORIA_INGRESO]

    @property
    def total_gastos_general(self) -> Decimal:
        return sum((self.total_gastos(c.clave) for c in self.columnas), CERO)

    @property
    def total_ingresos_general(self) -> Decimal:
        return sum((self.ingresos.get(c.clave, CERO) for c in self.columnas), CERO)

    def pct_de_fila(self, fila: FilaMatriz) -> Decimal:
        """Peso de una fila sobre el total de gastos; 0 si no hay gastos."""
        total = self.total_gastos_general
        if total == CERO:
            return CERO
        return fila.total / total * 100


@dataclass(frozen=True)
class TablaPlana:
    """Tabla plana para exportar: cabecera y filas de celdas simples.

    `filas` no incluye la cabecera; los escritores la toman de `columnas`.
    """

    columnas: tuple[str, ...]
    filas: tuple[tuple[str | Decimal, ...], ...]
    nombre_hoja: str = "Informe"

    def __post_init__(self) -> None:
        object.__setattr__(self, "columnas", tuple(self.columnas))
        object.__setattr__(self, "filas", tuple(tuple(f) for f in self.filas))
        for fila in self.filas:
            if len(fila) != len(self.columnas):
                raise ValueError(
                    f"Fila con {len(fila)} celdas para {len(self.columnas)} columnas: {fila!r}"
                )

    def como_filas(self) -> list[list[str | Decimal]]:
        """Cabecera seguida de las filas, en el orden literal de exportación."""
        return [list(self.columnas)] + [list(f) for f in self.filas]


@dataclass(frozen=True)
class LineaDetalle:
    """Movimiento imputado a una partida, con lo asignado al filtro actual."""

    feria_id: str
    movimiento: MovimientoReal
    importe_asignado: Decimal
    """Suma de las partes del reparto de los clientes filtrados, con su signo."""

"""
Universo de partidas (categorías) de presupuesto y gasto.

Las partidas estándar tienen un orden fijo que es el de la hoja de
seguimiento de ferias. Los presupuestos pueden traer partidas libres
adicionales: esas se añaden al final, por orden alfabético.
"""

from collections.abc import Iterable

CATEGORIA_INGRESO = "VENTA"
"""Partida de ingresos. Toda venta se imputa aquí."""

CATEGORIA_DEFECTO = "OTROS"
"""Partida a la que cae un gasto sin partida."""

CATEGORIAS_ESTANDAR: tuple[str, ...] = (
    "VENTA",
    "CARPINTERIA",
    "MONTAJE",
    "MATERIAL",
    "TRANSPORTE",
    "GASTOS VIAJE",
    "MOB ALQ",
    "ELECTRICIDAD",
    "SSFF",
    "MOB COMPRA",
    "GRAFICA",
    "GASTOS GG",
    "OTROS",
)

CATEGORIAS_GASTO: tuple[str, ...] = tuple(c for c in CATEGORIAS_ESTANDAR if c != CATEGORIA_INGRESO)

_ORDINAL = {categoria: idx for idx, categoria in enumerate(CATEGORIAS_ESTANDAR)}


def normalize_category(texto: str | None, defecto: str = CATEGORIA_DEFECTO) -> str:
    """Normaliza una partida: mayúsculas, espacios colapsados.

    Ejemplos:
        >>> normalize_category("  mob   alq ")
        'MOB ALQ'
        >>> normalize_category("")
        'OTROS'
        >>> normalize_category(None, defecto="VENTA")
        'VENTA'
    """
    if not texto or not str(texto).strip():
        return defecto
    return " ".join(str(texto).upper().split())


def is_standard_category(categoria: str) -> bool:
    return categoria in _ORDINAL


def category_sort_key(categoria: str) -> tuple[int, str]:
    """Clave de orden: primero las estándar en su orden, luego el resto A-Z."""
    return (_ORDINAL.get(categoria, len(_ORDINAL)), categoria)


def category_universe(extras: Iterable[str] = ()) -> list[str]:
    """Devuelve las partidas estándar más las partidas libres recibidas.

    Ejemplos:
        >>> category_universe(["STAND", "MONTAJE", "AZAFATAS"])[-2:]
        ['AZAFATAS', 'STAND']
    """
    universo = set(CATEGORIAS_ESTANDAR)
    universo.update(normalize_category(c) for c in extras)
    return sorted(universo, key=category_sort_key)

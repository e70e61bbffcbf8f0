"""
Servicio de dominio: Constructor de informes.

Toma las filas del agregador y produce:
- La comparativa por partida: presupuesto, % de ejecución, valor ganado
  (valor avance), coste real y desviación.
- La matriz partidas x clientes, por feria o global, a partir del
  presupuesto o de los movimientos reales.
- Las tablas planas que consumen los escritores de salida.

Es una vista pura: se recalcula entera cada vez que cambia la entrada
(dataset, filtro de clientes o porcentajes de ejecución).

Las celdas de las tablas planas son Decimal o texto, nunca importes ya
formateados.
"""

from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal
from typing import TypeVar

from feria_control.domain.models.dataset import ClienteEnFeria, Dataset
from feria_control.domain.models.informe import (
    Comparativa,
    FilaComparativa,
    FilaMatriz,
    FuenteMatriz,
    MatrizInforme,
    ModoInforme,
    TablaPlana,
)
from feria_control.domain.services import ledger_aggregator
from feria_control.domain.shared.categories import (
    CATEGORIA_INGRESO,
    category_sort_key,
    is_standard_category,
    normalize_category,
)
from feria_control.domain.shared.money import CERO, parse_money_safe

PCT_EJECUCION_DEFECTO = Decimal("100")
CIEN = Decimal("100")

COLUMNA_CATEGORIA = "CATEGORIA"
COLUMNA_TOTAL = "TOTAL"

COLUMNAS_COMPARATIVA = (
    "Partida",
    "Presupuesto",
    "% Ejecución",
    "Valor Avance",
    "Coste Real",
    "Desviación",
)

COLUMNAS_BACKUP = (
    "Feria",
    "Fecha",
    "Proveedor",
    "Concepto",
    "Partida",
    "Tipo",
    "Importe Total",
    "Modo Distribución",
)

CAMPOS_COMPARATIVA = {
    "presupuesto",
    "pct_ejecucion",
    "valor_avance",
    "coste_real",
    "desviacion",
    "pct_gastado",
}

Fila = TypeVar("Fila", FilaMatriz, FilaComparativa)


def clamp_execution_pct(valor: object) -> Decimal:
    """Normaliza el % de ejecución tecleado por el operador a [0, 100].

    Ejemplos:
        >>> clamp_execution_pct("80")
        Decimal('80')
        >>> clamp_execution_pct(500)
        Decimal('100')
        >>> clamp_execution_pct("-10")
        Decimal('0')
        >>> clamp_execution_pct("abc")
        Decimal('0')
    """
    return min(CIEN, max(CERO, parse_money_safe(valor)))


def build_comparison(
    clientes: Sequence[ClienteEnFeria],
    pcts_ejecucion: Mapping[str, object] | None = None,
    mostrar_estandar: bool = False,
) -> Comparativa:
    """Comparativa presupuesto / valor ganado / coste real por partida.

    Solo entran las partidas de gasto: VENTA no se compara.

    Args:
        clientes: Filtro de clientes (ver ledger_aggregator.resolve_clients).
        pcts_ejecucion: partida → % de ejecución tecleado. Las partidas que
            no aparecen van al 100 %.
        mostrar_estandar: Mantiene las partidas estándar aunque estén a cero.
    """
    pcts = {normalize_category(k): v for k, v in (pcts_ejecucion or {}).items()}

    filas: list[FilaComparativa] = []
    for fila in ledger_aggregator.category_rows(clientes, mostrar_estandar):
        if fila.categoria == CATEGORIA_INGRESO:
            continue

        if fila.categoria in pcts:
            pct = clamp_execution_pct(pcts[fila.categoria])
        else:
            pct = PCT_EJECUCION_DEFECTO

        valor_avance = fila.presupuesto * pct / CIEN
        pct_gastado = fila.real / fila.presupuesto * CIEN if fila.presupuesto != CERO else CERO
        filas.append(
            FilaComparativa(
                categoria=fila.categoria,
                presupuesto=fila.presupuesto,
                pct_ejecucion=pct,
                valor_avance=valor_avance,
                coste_real=fila.real,
                desviacion=valor_avance - fila.real,
                pct_gastado=pct_gastado,
            )
        )
    return Comparativa(filas=tuple(filas))


def build_matrix(
    clientes: Sequence[ClienteEnFeria],
    modo: ModoInforme = ModoInforme.FERIA,
    fuente: FuenteMatriz = FuenteMatriz.PRESUPUESTO,
) -> MatrizInforme:
    """Matriz partidas x clientes.

    Contiene todas las partidas del universo del filtro; las partidas
    libres a cero se descartan al exportar (`matrix_to_table`).

    Args:
        clientes: Columnas de la matriz, en el orden en que se mostrarán.
        modo: FERIA añade columnas TOTAL y %; GLOBAL no.
        fuente: PRESUPUESTO o REAL.
    """
    modo = ModoInforme(modo)
    fuente = FuenteMatriz(fuente)

    if fuente is FuenteMatriz.PRESUPUESTO:
        importe = ledger_aggregator.budget_total
        resumir = ledger_aggregator.budget_summary
    else:
        importe = ledger_aggregator.real_total
        resumir = ledger_aggregator.client_summary

    filas = tuple(
        FilaMatriz(
            categoria=categoria,
            valores={ref.clave: importe(categoria, [ref]) for ref in clientes},
        )
        for categoria in ledger_aggregator.categories_for(clientes)
    )
    ingresos = {ref.clave: resumir(ref).total_ingresos for ref in clientes}

    return MatrizInforme(
        modo=modo,
        fuente=fuente,
        columnas=tuple(clientes),
        filas=filas,
        ingresos=ingresos,
    )


def _ordenar(
    filas: Sequence[Fila],
    valor: Callable[[Fila], object],
    descendente: bool,
) -> list[Fila]:
    # Primero por orden de partida, luego por valor: el sort es estable y
    # los empates conservan el orden de partida.
    por_partida = sorted(filas, key=lambda f: category_sort_key(f.categoria))
    return sorted(por_partida, key=valor, reverse=descendente)


def sort_matrix_rows(
    filas: Sequence[FilaMatriz],
    columna: str = COLUMNA_CATEGORIA,
    descendente: bool = False,
) -> list[FilaMatriz]:
    """Ordena las filas de la matriz.

    Args:
        columna: COLUMNA_CATEGORIA (orden estándar y luego A-Z),
            COLUMNA_TOTAL, o la clave de un cliente ('FERIA::CLIENTE').
        descendente: Invierte el orden.
    """
    if columna == COLUMNA_CATEGORIA:
        return sorted(filas, key=lambda f: category_sort_key(f.categoria), reverse=descendente)
    if columna == COLUMNA_TOTAL:
        return _ordenar(filas, lambda f: f.total, descendente)
    return _ordenar(filas, lambda f: f.valor(columna), descendente)


def sort_comparison_rows(
    filas: Sequence[FilaComparativa],
    columna: str = COLUMNA_CATEGORIA,
    descendente: bool = False,
) -> list[FilaComparativa]:
    """Ordena las filas de la comparativa por partida o por un campo numérico.

    Raises:
        ValueError: Si `columna` no es un campo de FilaComparativa.
    """
    if columna == COLUMNA_CATEGORIA:
        return sorted(filas, key=lambda f: category_sort_key(f.categoria), reverse=descendente)
    if columna not in CAMPOS_COMPARATIVA:
        raise ValueError(
            f"Columna de orden desconocida: '{columna}'. "
            f"Disponibles: {sorted(CAMPOS_COMPARATIVA | {COLUMNA_CATEGORIA})}"
        )
    return _ordenar(filas, lambda f: getattr(f, columna), descendente)


def matrix_to_table(matriz: MatrizInforme, nombre_hoja: str = "Informe") -> TablaPlana:
    """Tabla plana de la matriz, en el orden literal de exportación.

    Cabecera, una fila por partida (sin las libres a cero), TOTAL,
    BENEFICIO y, solo en modo FERIA, % BENEFICIO. En modo FERIA cada fila
    lleva además las columnas TOTAL y %.
    """
    por_feria = matriz.modo is ModoInforme.FERIA
    claves = [ref.clave for ref in matriz.columnas]

    columnas: list[str] = ["Partida / Concepto"]
    columnas.extend(ref.etiqueta for ref in matriz.columnas)
    if por_feria:
        columnas.extend([COLUMNA_TOTAL, "%"])

    filas: list[list[str | Decimal]] = []
    for fila in matriz.filas:
        if fila.total == CERO and not is_standard_category(fila.categoria):
            continue
        celdas: list[str | Decimal] = [fila.categoria]
        celdas.extend(fila.valor(clave) for clave in claves)
        if por_feria:
            celdas.extend([fila.total, matriz.pct_de_fila(fila)])
        filas.append(celdas)

    total_gastos = matriz.total_gastos_general
    total_ingresos = matriz.total_ingresos_general
    beneficio_total = total_ingresos - total_gastos
    pct_beneficio_total = beneficio_total / total_ingresos * CIEN if total_ingresos != CERO else CERO

    fila_total: list[str | Decimal] = [COLUMNA_TOTAL]
    fila_total.extend(matriz.total_gastos(clave) for clave in claves)
    if por_feria:
        fila_total.extend([total_gastos, CIEN if total_gastos != CERO else CERO])
    filas.append(fila_total)

    fila_beneficio: list[str | Decimal] = ["BENEFICIO"]
    fila_beneficio.extend(matriz.beneficio(clave) for clave in claves)
    if por_feria:
        fila_beneficio.extend([beneficio_total, pct_beneficio_total])
    filas.append(fila_beneficio)

    if por_feria:
        fila_pct: list[str | Decimal] = ["% BENEFICIO"]
        fila_pct.extend(matriz.pct_beneficio(clave) for clave in claves)
        fila_pct.extend([pct_beneficio_total, ""])
        filas.append(fila_pct)

    return TablaPlana(columnas=tuple(columnas), filas=tuple(tuple(f) for f in filas), nombre_hoja=nombre_hoja)


def comparison_to_table(comparativa: Comparativa, nombre_hoja: str = "Comparativa") -> TablaPlana:
    """Tabla plana de la comparativa, con fila final de TOTALES."""
    filas: list[tuple[str | Decimal, ...]] = [
        (
            f.categoria,
            f.presupuesto,
            f.pct_ejecucion,
            f.valor_avance,
            f.coste_real,
            f.desviacion,
        )
        for f in comparativa.filas
    ]
    filas.append(
        (
            "TOTALES",
            comparativa.total_presupuesto,
            "",
            comparativa.total_valor_avance,
            comparativa.total_coste_real,
            comparativa.total_desviacion,
        )
    )
    return TablaPlana(columnas=COLUMNAS_COMPARATIVA, filas=tuple(filas), nombre_hoja=nombre_hoja)


def expenses_backup_table(dataset: Dataset, nombre_hoja: str = "Gastos Consolidado") -> TablaPlana:
    """Copia plana de todos los movimientos de todas las ferias."""
    filas: list[tuple[str | Decimal, ...]] = []
    for feria in dataset.ferias:
        for movimiento in feria.movimientos:
            filas.append(
                (
                    feria.nombre,
                    movimiento.fecha.isoformat() if movimiento.fecha else "",
                    movimiento.proveedor,
                    movimiento.concepto,
                    movimiento.categoria,
                    movimiento.tipo.value,
                    movimiento.importe_total,
                    movimiento.modo_reparto.value,
                )
            )
    return TablaPlana(columnas=COLUMNAS_BACKUP, filas=tuple(filas), nombre_hoja=nombre_hoja)

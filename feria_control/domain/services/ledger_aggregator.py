"""
Servicio de dominio: Agregador de presupuesto frente a real.

Cruza los movimientos reales de cada feria con los presupuestos de sus
clientes para obtener totales por partida y por cliente.

Los clientes se manejan siempre como `ClienteEnFeria`: cada cliente suma
SOLO los movimientos de su propia feria. Así, en modo global (todas las
ferias), dos clientes con el mismo id en ferias distintas no se mezclan y
una venta no se cuenta dos veces.

Todas las funciones son puras sobre la instantánea de Dataset recibida.
Una feria o un cliente desconocido no lanza error: aporta cero.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from feria_control.domain.models.dataset import ClienteEnFeria, Dataset
from feria_control.domain.models.informe import FilaCategoria, LineaDetalle, ResumenCliente
from feria_control.domain.models.movimiento_real import TipoMovimiento
from feria_control.domain.shared.categories import (
    category_universe,
    is_standard_category,
    normalize_category,
)
from feria_control.domain.shared.money import CERO


def resolve_clients(
    dataset: Dataset,
    feria_id: str | None = None,
    seleccion: Iterable[str] | None = None,
    incluir_archivados: bool = False,
) -> list[ClienteEnFeria]:
    """Resuelve el filtro de clientes de un informe.

    Combinaciones:
    - feria_id=None, seleccion=None: todos los clientes de todas las ferias
      (modo global).
    - feria_id="X", seleccion=None: todos los clientes de la feria X.
    - seleccion=[...]: solo esos clientes. Cada elemento puede ser la clave
      combinada 'FERIA::CLIENTE' o, si se indicó feria_id, el id del
      cliente a secas. Sirve tanto para un único cliente como para un
      subconjunto.

    Las referencias que no existen se ignoran. El orden del resultado es el
    del dataset (ferias y, dentro de cada una, clientes).

    Args:
        dataset: Instantánea del dataset.
        feria_id: Limita a una feria. Si no existe, el resultado es vacío.
        seleccion: Claves o ids de cliente a incluir.
        incluir_archivados: Incluye clientes con estado archivado.
    """
    if feria_id is None:
        ferias = dataset.ferias
    else:
        feria = dataset.buscar_feria(feria_id)
        ferias = [feria] if feria is not None else []

    filtro = set(seleccion) if seleccion is not None else None

    resultado: list[ClienteEnFeria] = []
    for feria in ferias:
        for cliente in feria.clientes:
            if cliente.archivado and not incluir_archivados:
                continue
            ref = ClienteEnFeria(cliente=cliente, feria=feria)
            if filtro is not None and not _coincide(ref, filtro, feria_id):
                continue
            resultado.append(ref)
    return resultado


def _coincide(ref: ClienteEnFeria, filtro: set[str], feria_id: str | None) -> bool:
    if ref.clave in filtro:
        return True
    return feria_id is not None and ref.cliente.id in filtro


def budget_total(categoria: str, clientes: Sequence[ClienteEnFeria]) -> Decimal:
    """Importe presupuestado en la partida por el conjunto de clientes.

    Para la partida VENTA suma los ingresos previstos; para cualquier otra,
    los gastos estimados.
    """
    categoria = normalize_category(categoria)
    return sum((ref.cliente.presupuesto.importe_categoria(categoria) for ref in clientes), CERO)


def real_total(categoria: str, clientes: Sequence[ClienteEnFeria]) -> Decimal:
    """Importe real imputado a la partida por el conjunto de clientes.

    Cada cliente suma su aportación efectiva (coste en gastos, ingreso en
    ventas) en los movimientos de SU feria.
    """
    categoria = normalize_category(categoria)
    total = CERO
    for ref in clientes:
        for movimiento in ref.feria.movimientos_de(categoria):
            total += movimiento.importe_efectivo_para(ref.cliente.id)
    return total


def client_summary(ref: ClienteEnFeria) -> ResumenCliente:
    """Totales reales de un cliente: gastos, ingresos, beneficio y margen."""
    gastos = CERO
    ingresos = CERO
    for movimiento in ref.feria.movimientos:
        efectivo = movimiento.importe_efectivo_para(ref.cliente.id)
        if movimiento.tipo is TipoMovimiento.INGRESO:
            ingresos += efectivo
        else:
            gastos += efectivo
    return ResumenCliente(total_gastos=gastos, total_ingresos=ingresos)


def budget_summary(ref: ClienteEnFeria) -> ResumenCliente:
    """Los mismos totales que `client_summary`, sacados del presupuesto."""
    presupuesto = ref.cliente.presupuesto
    return ResumenCliente(
        total_gastos=presupuesto.total_gastos,
        total_ingresos=presupuesto.total_ingresos,
    )


def group_summary(clientes: Sequence[ClienteEnFeria], desde_presupuesto: bool = False) -> ResumenCliente:
    """Suma los resúmenes de varios clientes en uno solo."""
    resumir = budget_summary if desde_presupuesto else client_summary
    resumenes = [resumir(ref) for ref in clientes]
    return ResumenCliente(
        total_gastos=sum((r.total_gastos for r in resumenes), CERO),
        total_ingresos=sum((r.total_ingresos for r in resumenes), CERO),
    )


def categories_for(clientes: Sequence[ClienteEnFeria]) -> list[str]:
    """Universo de partidas del filtro: las estándar más las libres.

    Las partidas libres salen de los presupuestos y también de los
    movimientos, para que un gasto imputado a una partida no presupuestada
    siga apareciendo en los informes.
    """
    extras: set[str] = set()
    ferias_vistas: set[str] = set()
    for ref in clientes:
        extras.update(ref.cliente.presupuesto.categorias)
        if ref.feria.id not in ferias_vistas:
            ferias_vistas.add(ref.feria.id)
            extras.update(m.categoria for m in ref.feria.movimientos)
    return category_universe(extras)


def category_rows(
    clientes: Sequence[ClienteEnFeria],
    mostrar_estandar: bool = False,
) -> list[FilaCategoria]:
    """Presupuesto y real por partida para el filtro de clientes.

    Se omiten las partidas con presupuesto y real a cero, salvo que
    `mostrar_estandar` pida mostrar siempre las estándar.
    """
    filas: list[FilaCategoria] = []
    for categoria in categories_for(clientes):
        fila = FilaCategoria(
            categoria=categoria,
            presupuesto=budget_total(categoria, clientes),
            real=real_total(categoria, clientes),
        )
        if fila.vacia and not (mostrar_estandar and is_standard_category(categoria)):
            continue
        filas.append(fila)
    return filas


def detail_lines(categoria: str, clientes: Sequence[ClienteEnFeria]) -> list[LineaDetalle]:
    """Movimientos de una partida con lo asignado a los clientes filtrados.

    Se omiten los movimientos cuyo importe asignado al filtro es cero.
    """
    categoria = normalize_category(categoria)
    por_feria: dict[str, list[ClienteEnFeria]] = {}
    for ref in clientes:
        por_feria.setdefault(ref.feria.id, []).append(ref)

    lineas: list[LineaDetalle] = []
    for feria_id, refs in por_feria.items():
        feria = refs[0].feria
        for movimiento in feria.movimientos_de(categoria):
            asignado = sum((movimiento.importe_para(r.cliente.id) for r in refs), CERO)
            if asignado == CERO:
                continue
            lineas.append(LineaDetalle(feria_id=feria_id, movimiento=movimiento, importe_asignado=asignado))
    return lineas

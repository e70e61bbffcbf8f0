"""
Servicio de dominio: Motor de reparto.

Dado un movimiento real (partida, importe, tipo) y los clientes
seleccionados, calcula cuánto corresponde a cada cliente.

Tres casos:
- GASTO proporcional: según el peso presupuestado de cada cliente en la
  partida. Se hace en DOS pasadas explícitas:
    1. `calculate_weights`: pesos de TODOS los clientes de la feria.
    2. `split_among_selected`: reparto solo entre los seleccionados,
       normalizando sobre la suma de SUS pesos.
  Un cliente no seleccionado no se lleva nada, aunque tenga presupuesto.
- GASTO manual: los importes que teclea el operador, sin normalizar.
- INGRESO: el 100 % al único cliente seleccionado.

Todas las funciones son puras y no lanzan excepciones: un importe manual
ilegible cuenta como 0 y un cliente desconocido no aporta nada. El
descuadre resultante se avisa aparte (`ResultadoReparto.cuadrado`).
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

from feria_control.domain.models.cliente import Cliente
from feria_control.domain.models.movimiento_real import ModoReparto, TipoMovimiento
from feria_control.domain.models.reparto import PesosCategoria, ResultadoReparto
from feria_control.domain.shared.categories import normalize_category
from feria_control.domain.shared.money import CERO, parse_money_safe

UNO = Decimal("1")


def calculate_weights(clientes: Sequence[Cliente], categoria: str) -> PesosCategoria:
    """Primera pasada: peso de cada cliente de la feria en la partida.

    El peso es la suma de los gastos estimados del cliente en la partida.
    Si NINGÚN cliente la presupuestó, todos pesan 1 (reparto igualitario).

    Args:
        clientes: Todos los clientes de la feria, no solo los seleccionados.
        categoria: Partida del movimiento.
    """
    categoria = normalize_category(categoria)
    pesos = {c.id: c.presupuesto.estimado_en(categoria) for c in clientes}
    total = sum(pesos.values(), CERO)

    if total == CERO:
        pesos = {cliente_id: UNO for cliente_id in pesos}

    return PesosCategoria(pesos=pesos, total_presupuesto=total)


def split_among_selected(
    importe_total: Decimal,
    pesos: PesosCategoria,
    seleccionados: Sequence[str],
) -> dict[str, Decimal]:
    """Segunda pasada: reparte el importe solo entre los seleccionados.

    Los clientes activos son la intersección de los seleccionados con los
    clientes con peso (los de la feria), en el orden de la feria. Si la
    suma de pesos activos es 0, el importe se divide a partes iguales.

    Ejemplos:
        X pesa 1000 e Y pesa 0, ambos seleccionados, importe 300:
        X recibe 300 e Y recibe 0.
    """
    seleccion = set(seleccionados)
    activos = [cliente_id for cliente_id in pesos.pesos if cliente_id in seleccion]
    if not activos:
        return {}

    suma_activa = sum((pesos.peso_de(c) for c in activos), CERO)

    if suma_activa == CERO:
        parte = importe_total / len(activos)
        return {cliente_id: parte for cliente_id in activos}

    return {
        cliente_id: importe_total * pesos.peso_de(cliente_id) / suma_activa
        for cliente_id in activos
    }


def split_manual(
    seleccionados: Sequence[str],
    valores_manuales: Mapping[str, object],
) -> dict[str, Decimal]:
    """Reparto manual: el importe tecleado para cada seleccionado, o 0."""
    return {
        cliente_id: parse_money_safe(valores_manuales.get(cliente_id))
        for cliente_id in dict.fromkeys(seleccionados)
    }


def assign_income(importe_total: Decimal, seleccionados: Sequence[str]) -> dict[str, Decimal]:
    """Una venta va entera a un solo cliente: el último seleccionado."""
    if not seleccionados:
        return {}
    return {seleccionados[-1]: importe_total}


def distribute(
    clientes: Sequence[Cliente],
    categoria: str,
    importe_total: Decimal,
    tipo: TipoMovimiento,
    seleccionados: Sequence[str],
    modo: ModoReparto = ModoReparto.PROPORCIONAL,
    valores_manuales: Mapping[str, object] | None = None,
) -> ResultadoReparto:
    """Calcula el reparto de un movimiento entre los clientes seleccionados.

    Args:
        clientes: Clientes de la feria (fuente de los pesos).
        categoria: Partida del movimiento. Se ignora en ventas.
        importe_total: Importe con signo del movimiento.
        tipo: GASTO o INGRESO. Una venta ignora `modo`.
        seleccionados: Ids de los clientes que participan.
        modo: PROPORCIONAL o MANUAL.
        valores_manuales: cliente_id → importe (texto o número). Solo MANUAL.

    Returns:
        ResultadoReparto con el reparto y, si es proporcional, los pesos.
    """
    tipo = TipoMovimiento(tipo)
    modo = ModoReparto(modo)

    if tipo is TipoMovimiento.INGRESO:
        return ResultadoReparto(
            importe_total=importe_total,
            tipo=tipo,
            modo=modo,
            reparto=assign_income(importe_total, seleccionados),
        )

    if modo is ModoReparto.MANUAL:
        return ResultadoReparto(
            importe_total=importe_total,
            tipo=tipo,
            modo=modo,
            reparto=split_manual(seleccionados, valores_manuales or {}),
        )

    pesos = calculate_weights(clientes, categoria)
    return ResultadoReparto(
        importe_total=importe_total,
        tipo=tipo,
        modo=modo,
        reparto=split_among_selected(importe_total, pesos, seleccionados),
        pesos=pesos,
    )


def toggle_client(
    seleccionados: Sequence[str],
    cliente_id: str,
    tipo: TipoMovimiento,
) -> list[str]:
    """Marca o desmarca un cliente en la selección.

    En ventas la selección es de como mucho un cliente: marcar uno nuevo
    reemplaza al anterior.

    Ejemplos:
        >>> toggle_client(["A"], "B", TipoMovimiento.GASTO)
        ['A', 'B']
        >>> toggle_client(["A"], "B", TipoMovimiento.INGRESO)
        ['B']
        >>> toggle_client(["A", "B"], "A", TipoMovimiento.GASTO)
        ['B']
    """
    if cliente_id in seleccionados:
        return [c for c in seleccionados if c != cliente_id]
    if TipoMovimiento(tipo) is TipoMovimiento.INGRESO:
        return [cliente_id]
    return [*seleccionados, cliente_id]

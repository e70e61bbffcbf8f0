"""
Conversión entre el documento JSON de ferias y los modelos de dominio.

El documento conserva el formato histórico (claves en camelCase):

    {"fairs": [
        {"id": "FITUR-2025", "name": "FITUR", "status": "Active",
         "date": "2025-01-22",
         "clients": [
            {"id": "ACME", "name": "ACME", "status": "Active",
             "budget": {
                "income":   [{"category": "VENTA", "description": "...", "amount": 5000}],
                "expenses": [{"category": "MONTAJE", "description": "...",
                              "type": "Previsión", "estimated": 1200}]}}],
         "realExpenses": [
            {"id": "EXP-...", "type": "EXPENSE", "category": "MONTAJE",
             "provider": "...", "concept": "...", "date": "2025-01-20",
             "totalAmount": -300, "distribution": {"ACME": -300},
             "distributionMode": "PROPORTIONAL",
             "createdAt": "2025-01-20T10:00:00Z"}]}]}

Las claves desconocidas se ignoran al leer. Los importes se leen con la
conversión tolerante (un texto ilegible cuenta como 0) y se escriben como
números JSON.

Los datos importados de hojas de cálculo pueden traer previsiones con
signo (el gasto en negativo). En el presupuesto se guarda su valor
absoluto, con un aviso en el log.
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from feria_control.domain.models.cliente import Cliente, PartidaGasto, PartidaIngreso, Presupuesto
from feria_control.domain.models.dataset import Dataset
from feria_control.domain.models.feria import EstadoFeria, Feria
from feria_control.domain.models.movimiento_real import ModoReparto, MovimientoReal, TipoMovimiento
from feria_control.domain.shared.money import CERO, parse_money_safe

logger = logging.getLogger(__name__)


# =================================================================
# Lectura
# =================================================================


def dataset_from_dict(data: dict) -> Dataset:
    """Construye el Dataset a partir del documento JSON ya decodificado.

    Raises:
        TypeError, KeyError, ValueError: Si el documento no tiene la
            estructura esperada. El adaptador de almacenamiento las
            convierte en PersistenciaError.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Se esperaba un objeto JSON, se recibió {type(data).__name__}")
    return Dataset(ferias=[_feria_from_dict(f) for f in data.get("fairs") or []])


def _feria_from_dict(data: dict) -> Feria:
    return Feria(
        id=str(data["id"]),
        nombre=str(data.get("name") or data["id"]),
        estado=EstadoFeria(data.get("status") or EstadoFeria.ACTIVA.value),
        fecha=_parse_date(data.get("date")),
        clientes=[_cliente_from_dict(c) for c in data.get("clients") or []],
        movimientos=[_movimiento_from_dict(m) for m in data.get("realExpenses") or []],
    )


def _cliente_from_dict(data: dict) -> Cliente:
    budget = data.get("budget") or {}
    ingresos = [
        PartidaIngreso(
            descripcion=str(i.get("description") or ""),
            # Los datos importados de hojas antiguas guardan el ingreso en "estimated"
            importe=_previsto(i.get("amount", i.get("estimated")), data),
            categoria=i.get("category") or "",
            id=str(i.get("id") or ""),
        )
        for i in budget.get("income") or []
    ]
    gastos = [
        PartidaGasto(
            categoria=g.get("category") or "",
            descripcion=str(g.get("description") or ""),
            estimado=_previsto(g.get("estimated"), data),
            tipo=str(g.get("type") or "Previsión"),
            id=str(g.get("id") or ""),
        )
        for g in budget.get("expenses") or []
    ]
    return Cliente(
        id=str(data["id"]),
        nombre=str(data.get("name") or data["id"]),
        estado=str(data.get("status") or "Active"),
        presupuesto=Presupuesto(ingresos=ingresos, gastos=gastos),
    )


def _previsto(value: object, cliente: dict) -> Decimal:
    """Importe previsto del presupuesto, siempre >= 0."""
    importe = parse_money_safe(value)
    if importe < CERO:
        logger.warning(
            "Previsión negativa (%s) en el cliente %s: se toma su valor absoluto",
            importe,
            cliente.get("id"),
        )
        return -importe
    return importe


def _movimiento_from_dict(data: dict) -> MovimientoReal:
    return MovimientoReal(
        id=str(data["id"]),
        tipo=TipoMovimiento(data.get("type") or TipoMovimiento.GASTO.value),
        categoria=data.get("category") or "",
        importe_total=parse_money_safe(data.get("totalAmount")),
        reparto={str(k): parse_money_safe(v) for k, v in (data.get("distribution") or {}).items()},
        modo_reparto=ModoReparto(data.get("distributionMode") or ModoReparto.PROPORCIONAL.value),
        fecha=_parse_date(data.get("date")),
        proveedor=str(data.get("provider") or ""),
        concepto=str(data.get("concept") or ""),
        creado_en=_parse_datetime(data.get("createdAt")),
        actualizado_en=_parse_datetime(data.get("updatedAt")),
    )


def _parse_date(value: object) -> date | None:
    """'2025-01-22' → date. Vacío o ilegible → None."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _parse_datetime(value: object) -> datetime | None:
    """ISO 8601, con o sin 'Z' final. Vacío o ilegible → None."""
    if not isinstance(value, str) or not value.strip():
        return None
    texto = value.strip()
    if texto.endswith("Z"):
        texto = texto[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(texto)
    except ValueError:
        return None


# =================================================================
# Escritura
# =================================================================


def dataset_to_dict(dataset: Dataset) -> dict:
    """Documento JSON (ya listo para json.dump) a partir del Dataset."""
    return {"fairs": [_feria_to_dict(f) for f in dataset.ferias]}


def _feria_to_dict(feria: Feria) -> dict:
    return {
        "id": feria.id,
        "name": feria.nombre,
        "status": feria.estado.value,
        "date": feria.fecha.isoformat() if feria.fecha else "",
        "clients": [_cliente_to_dict(c) for c in feria.clientes],
        "realExpenses": [_movimiento_to_dict(m) for m in feria.movimientos],
    }


def _cliente_to_dict(cliente: Cliente) -> dict:
    return {
        "id": cliente.id,
        "name": cliente.nombre,
        "status": cliente.estado,
        "budget": {
            "income": [
                {
                    "id": i.id,
                    "category": i.categoria,
                    "description": i.descripcion,
                    "amount": _number(i.importe),
                }
                for i in cliente.presupuesto.ingresos
            ],
            "expenses": [
                {
                    "id": g.id,
                    "category": g.categoria,
                    "description": g.descripcion,
                    "type": g.tipo,
                    "estimated": _number(g.estimado),
                }
                for g in cliente.presupuesto.gastos
            ],
        },
    }


def _movimiento_to_dict(movimiento: MovimientoReal) -> dict:
    data = {
        "id": movimiento.id,
        "type": movimiento.tipo.value,
        "category": movimiento.categoria,
        "provider": movimiento.proveedor,
        "concept": movimiento.concepto,
        "date": movimiento.fecha.isoformat() if movimiento.fecha else "",
        "totalAmount": _number(movimiento.importe_total),
        "distribution": {k: _number(v) for k, v in movimiento.reparto.items()},
        "distributionMode": movimiento.modo_reparto.value,
    }
    if movimiento.creado_en is not None:
        data["createdAt"] = movimiento.creado_en.isoformat()
    if movimiento.actualizado_en is not None:
        data["updatedAt"] = movimiento.actualizado_en.isoformat()
    return data


def _number(value: Decimal) -> int | float:
    """Decimal → número JSON: entero si no tiene decimales."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)

"""
Fixtures y dobles de prueba compartidos.

- InMemoryStorage: almacenamiento en memoria con la misma semántica que el
  real (carga y guarda el documento ENTERO, copiándolo).
- RecordingLogger: bitácora que acumula los eventos para hacer asserts.
- Constructores de clientes, ferias y movimientos con valores mínimos.
"""

import copy
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from feria_control.domain.models import (
    Cliente,
    Dataset,
    Feria,
    ModoReparto,
    MovimientoReal,
    PartidaGasto,
    PartidaIngreso,
    Presupuesto,
    TipoMovimiento,
)
from feria_control.domain.ports import DatasetStorage, ProcessLogger


class InMemoryStorage(DatasetStorage):
    def __init__(self, dataset: Dataset | None = None) -> None:
        self._dataset = copy.deepcopy(dataset) if dataset is not None else Dataset()
        self.saves = 0

    def load(self) -> Dataset:
        return copy.deepcopy(self._dataset)

    def save(self, dataset: Dataset) -> None:
        self._dataset = copy.deepcopy(dataset)
        self.saves += 1


class RecordingLogger(ProcessLogger):
    def __init__(self) -> None:
        self.eventos: list[tuple] = []

    def log_dataset_loaded(self, num_ferias: int) -> None:
        self.eventos.append(("loaded", num_ferias))

    def log_dataset_saved(self, num_ferias: int) -> None:
        self.eventos.append(("saved", num_ferias))

    def log_movimiento_saved(self, feria_id: str, movimiento: MovimientoReal, editado: bool) -> None:
        self.eventos.append(("movimiento", feria_id, movimiento.id, editado))

    def log_confirmation_required(self, feria_id: str, advertencias: list[str]) -> None:
        self.eventos.append(("confirmacion", feria_id, tuple(advertencias)))

    def log_feria_changed(self, feria_id: str, accion: str) -> None:
        self.eventos.append(("feria", feria_id, accion))

    def log_export_complete(self, output_path: Path, num_tablas: int) -> None:
        self.eventos.append(("export", output_path, num_tablas))

    def log_error(self, contexto: str, error: Exception) -> None:
        self.eventos.append(("error", contexto, str(error)))

    def get_summary(self) -> dict:
        return {"eventos": len(self.eventos)}

    def de_tipo(self, tipo: str) -> list[tuple]:
        return [e for e in self.eventos if e[0] == tipo]


# =================================================================
# Constructores
# =================================================================


def hacer_cliente(
    cliente_id: str,
    gastos: dict[str, str] | None = None,
    ingresos: str | None = None,
    estado: str = "Active",
) -> Cliente:
    """Cliente con un gasto estimado por partida y, opcionalmente, una venta prevista."""
    partidas = [
        PartidaGasto(categoria=cat, descripcion=f"Estimado {cat}", estimado=Decimal(importe))
        for cat, importe in (gastos or {}).items()
    ]
    ventas = [PartidaIngreso(descripcion="Venta", importe=Decimal(ingresos))] if ingresos else []
    return Cliente(
        id=cliente_id,
        nombre=cliente_id,
        estado=estado,
        presupuesto=Presupuesto(ingresos=ventas, gastos=partidas),
    )


def hacer_gasto(
    movimiento_id: str,
    categoria: str,
    reparto: dict[str, str],
    total: str | None = None,
    modo: ModoReparto = ModoReparto.PROPORCIONAL,
) -> MovimientoReal:
    """Gasto real (importes en negativo, como se registran)."""
    valores = {k: Decimal(v) for k, v in reparto.items()}
    return MovimientoReal(
        id=movimiento_id,
        tipo=TipoMovimiento.GASTO,
        categoria=categoria,
        importe_total=Decimal(total) if total is not None else sum(valores.values(), Decimal("0")),
        reparto=valores,
        modo_reparto=modo,
        proveedor="Proveedor",
        concepto=f"Factura {movimiento_id}",
    )


def hacer_venta(movimiento_id: str, cliente_id: str, importe: str) -> MovimientoReal:
    return MovimientoReal(
        id=movimiento_id,
        tipo=TipoMovimiento.INGRESO,
        categoria="VENTA",
        importe_total=Decimal(importe),
        reparto={cliente_id: Decimal(importe)},
    )


# =================================================================
# Fixtures
# =================================================================


@pytest.fixture
def feria_fitur() -> Feria:
    """Feria con dos clientes presupuestados y tres movimientos reales.

    ACME:   MONTAJE 1000, CARPINTERIA 600, venta prevista 3000
    GLOBEX: MONTAJE 500,  STAND 200 (partida libre), venta prevista 1000
    """
    return Feria(
        id="FITUR-2025",
        nombre="FITUR",
        clientes=[
            hacer_cliente("ACME", {"MONTAJE": "1000", "CARPINTERIA": "600"}, ingresos="3000"),
            hacer_cliente("GLOBEX", {"MONTAJE": "500", "STAND": "200"}, ingresos="1000"),
        ],
        movimientos=[
            hacer_gasto("EXP-1", "MONTAJE", {"ACME": "-200", "GLOBEX": "-100"}),
            hacer_gasto("EXP-2", "CARPINTERIA", {"ACME": "-450"}),
            hacer_venta("EXP-3", "ACME", "2500"),
        ],
    )


@pytest.fixture
def dataset(feria_fitur: Feria) -> Dataset:
    """Dataset con FITUR y una segunda feria que repite el id de cliente ACME."""
    ifema = Feria(
        id="IFEMA-2025",
        nombre="IFEMA",
        clientes=[
            hacer_cliente("ACME", {"MONTAJE": "800"}, ingresos="2000"),
            hacer_cliente("INITECH", {"GRAFICA": "300"}, estado="Archived"),
        ],
        movimientos=[hacer_gasto("EXP-9", "MONTAJE", {"ACME": "-700"})],
    )
    return Dataset(ferias=[feria_fitur, ifema])


@pytest.fixture
def storage(dataset: Dataset) -> InMemoryStorage:
    return InMemoryStorage(dataset)


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def reloj():
    """Reloj fijo para los servicios."""
    return lambda: datetime(2025, 3, 1, 12, 0, 0)

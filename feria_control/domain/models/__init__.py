"""
Modelos de dominio del proyecto feria-control.

Las partidas, clientes y movimientos son dataclasses inmutables
(frozen=True); la Feria y el Dataset son mutables porque la imputación y la
gestión de presupuestos los modifican antes de guardarlos.

Uso:
    from feria_control.domain.models import Feria, Cliente, MovimientoReal
"""

from feria_control.domain.models.cliente import Cliente, PartidaGasto, PartidaIngreso, Presupuesto
from feria_control.domain.models.dataset import ClienteEnFeria, Dataset
from feria_control.domain.models.feria import EstadoFeria, Feria
from feria_control.domain.models.informe import (
    Comparativa,
    FilaCategoria,
    FilaComparativa,
    FilaMatriz,
    FuenteMatriz,
    LineaDetalle,
    MatrizInforme,
    ModoInforme,
    ResumenCliente,
    TablaPlana,
)
from feria_control.domain.models.movimiento_real import ModoReparto, MovimientoReal, TipoMovimiento
from feria_control.domain.models.reparto import PesosCategoria, ResultadoReparto

__all__ = [
    "Cliente",
    "ClienteEnFeria",
    "Comparativa",
    "Dataset",
    "EstadoFeria",
    "Feria",
    "FilaCategoria",
    "FilaComparativa",
    "FilaMatriz",
    "FuenteMatriz",
    "LineaDetalle",
    "MatrizInforme",
    "ModoInforme",
    "ModoReparto",
    "MovimientoReal",
    "PartidaGasto",
    "PartidaIngreso",
    "Presupuesto",
    "PesosCategoria",
    "ResultadoReparto",
    "ResumenCliente",
    "TablaPlana",
    "TipoMovimiento",
]

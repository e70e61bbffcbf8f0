"""
Modelo de dominio: Feria.

La feria es el agregado raíz: posee en exclusiva sus clientes y sus
movimientos reales. A diferencia de las partidas y los movimientos, la
feria es mutable: la imputación añade o reemplaza movimientos y la gestión
de presupuestos reemplaza la lista de clientes.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from feria_control.domain.models.cliente import Cliente
from feria_control.domain.models.movimiento_real import MovimientoReal
from feria_control.domain.shared.categories import normalize_category


class EstadoFeria(str, Enum):
    ACTIVA = "Active"
    PLANIFICACION = "Planning"
    ARCHIVADA = "Archived"


@dataclass
class Feria:
    """Evento (feria) con sus clientes y movimientos reales."""

    id: str
    nombre: str
    estado: EstadoFeria = EstadoFeria.ACTIVA
    fecha: date | None = None
    clientes: list[Cliente] = field(default_factory=list)
    """Lista ordenada: el orden es el de las columnas en los informes."""

    movimientos: list[MovimientoReal] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.estado = EstadoFeria(self.estado)
        if not self.id:
            raise ValueError("El id de la feria no puede estar vacío")

    @property
    def archivada(self) -> bool:
        return self.estado is EstadoFeria.ARCHIVADA

    def buscar_cliente(self, cliente_id: str) -> Cliente | None:
        """Devuelve el cliente con ese id o None si no existe."""
        return next((c for c in self.clientes if c.id == cliente_id), None)

    def buscar_movimiento(self, movimiento_id: str) -> MovimientoReal | None:
        return next((m for m in self.movimientos if m.id == movimiento_id), None)

    def movimientos_de(self, categoria: str) -> list[MovimientoReal]:
        """Movimientos imputados a una partida, en orden de registro."""
        categoria = normalize_category(categoria)
        return [m for m in self.movimientos if m.categoria == categoria]

    def registrar_movimiento(self, movimiento: MovimientoReal) -> bool:
        """Añade el movimiento o reemplaza el existente con el mismo id.

        Returns:
            True si reemplazó un movimiento existente (edición),
            False si lo añadió (alta).
        """
        for idx, existente in enumerate(self.movimientos):
            if existente.id == movimiento.id:
                self.movimientos[idx] = movimiento
                return True
        self.movimientos.append(movimiento)
        return False

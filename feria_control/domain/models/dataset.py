"""
Modelo de dominio: Dataset completo y referencia cliente-en-feria.

El Dataset es la instantánea que devuelve el almacenamiento con `load()`
y que se reemplaza entera con `save()`. Todos los cálculos reciben la
instantánea como parámetro: no hay un "dataset actual" global.
"""

from dataclasses import dataclass, field

from feria_control.domain.models.cliente import Cliente
from feria_control.domain.models.feria import Feria


@dataclass
class Dataset:
    """Documento completo: todas las ferias."""

    ferias: list[Feria] = field(default_factory=list)

    def buscar_feria(self, feria_id: str) -> Feria | None:
        """Devuelve la feria con ese id o None si no existe."""
        return next((f for f in self.ferias if f.id == feria_id), None)


@dataclass(frozen=True)
class ClienteEnFeria:
    """Un cliente junto con la feria a la que pertenece.

    Es la unidad de columna de los informes. En modo global (comparativa
    entre ferias) dos clientes de ferias distintas pueden compartir id; la
    clave combinada evita mezclarlos, y cada cliente solo suma los
    movimientos de su propia feria.
    """

    cliente: Cliente
    feria: Feria

    @property
    def clave(self) -> str:
        """Identificador único entre ferias: 'FERIA::CLIENTE'."""
        return f"{self.feria.id}::{self.cliente.id}"

    @property
    def etiqueta(self) -> str:
        """Cabecera de columna: 'CLIENTE (FERIA)'."""
        return f"{self.cliente.nombre} ({self.feria.nombre})"

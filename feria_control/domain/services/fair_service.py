"""
Servicio de dominio: Gestión de ferias y presupuestos de clientes.

Operaciones de mantenimiento alrededor del motor de reparto: listar y
filtrar ferias, crear una feria (opcionalmente clonando los clientes de
otra), archivarla, y dar de alta, reemplazar o borrar presupuestos de
clientes.

Cada operación que modifica algo carga el dataset, lo cambia y lo guarda
entero.
"""

import random
import re
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date, datetime

from feria_control.domain.exceptions import ClienteNoEncontradoError, FeriaNoEncontradaError
from feria_control.domain.models.cliente import Cliente, Presupuesto
from feria_control.domain.models.dataset import Dataset
from feria_control.domain.models.feria import EstadoFeria, Feria
from feria_control.domain.ports.dataset_storage import DatasetStorage
from feria_control.domain.ports.process_logger import ProcessLogger


def slugify(nombre: str) -> str:
    """'Fitur Madrid' → 'FITUR-MADRID'."""
    return re.sub(r"\s+", "-", nombre.strip()).upper()


class FairService:
    """Alta, baja y mantenimiento de ferias y clientes."""

    def __init__(
        self,
        storage: DatasetStorage,
        logger: ProcessLogger,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._logger = logger
        self._now = now

    # --- Consultas ---

    def list_fairs(
        self,
        archivadas: bool = False,
        anio: int | None = None,
        mes: int | None = None,
    ) -> list[Feria]:
        """Ferias que cumplen el filtro, en el orden del dataset.

        Args:
            archivadas: True lista SOLO las archivadas; False, el resto.
            anio: Año de la fecha de la feria. None = cualquiera.
            mes: Mes (1-12) de la fecha de la feria. None = cualquiera.
                Una feria sin fecha no pasa un filtro de año o mes.
        """
        resultado = []
        for feria in self._storage.load().ferias:
            if feria.archivada != archivadas:
                continue
            if anio is not None and (feria.fecha is None or feria.fecha.year != anio):
                continue
            if mes is not None and (feria.fecha is None or feria.fecha.month != mes):
                continue
            resultado.append(feria)
        return resultado

    def available_years(self) -> list[int]:
        """Años con alguna feria, del más reciente al más antiguo."""
        anios = {f.fecha.year for f in self._storage.load().ferias if f.fecha is not None}
        return sorted(anios, reverse=True)

    # --- Ferias ---

    def create_fair(self, nombre: str, fuente_id: str | None = None, hoy: date | None = None) -> Feria:
        """Crea una feria activa con id 'NOMBRE-AÑO'.

        Si ya existe una feria con ese id, se devuelve sin tocarla. Si se
        indica `fuente_id`, se copian sus clientes con sus presupuestos
        (con ids nuevos); los movimientos reales no se copian. Una feria
        fuente inexistente deja la nueva sin clientes.

        Raises:
            ValueError: Si el nombre está vacío.
        """
        if not nombre or not nombre.strip():
            raise ValueError("El nombre de la feria no puede estar vacío")

        hoy = hoy or self._now().date()
        dataset = self._storage.load()
        feria_id = f"{slugify(nombre)}-{hoy.year}"

        existente = dataset.buscar_feria(feria_id)
        if existente is not None:
            return existente

        feria = Feria(id=feria_id, nombre=nombre.strip(), estado=EstadoFeria.ACTIVA, fecha=hoy)
        if fuente_id:
            fuente = dataset.buscar_feria(fuente_id)
            if fuente is not None:
                feria.clientes = [self._clonar_cliente(c) for c in fuente.clientes]

        dataset.ferias.append(feria)
        self._guardar(dataset)
        self._logger.log_feria_changed(feria.id, "creada")
        return feria

    def toggle_archive(self, feria_id: str) -> EstadoFeria:
        """Archiva una feria, o la reactiva si ya estaba archivada.

        Returns:
            El nuevo estado de la feria.
        """
        dataset = self._storage.load()
        feria = self._feria(dataset, feria_id)
        feria.estado = EstadoFeria.ACTIVA if feria.archivada else EstadoFeria.ARCHIVADA

        self._guardar(dataset)
        self._logger.log_feria_changed(feria.id, "archivada" if feria.archivada else "reactivada")
        return feria.estado

    # --- Clientes ---

    def save_clients(self, feria_id: str, clientes: Sequence[Cliente]) -> Feria:
        """Reemplaza la lista completa de clientes (y presupuestos) de una feria."""
        dataset = self._storage.load()
        feria = self._feria(dataset, feria_id)
        feria.clientes = list(clientes)

        self._guardar(dataset)
        self._logger.log_feria_changed(feria.id, "presupuestos actualizados")
        return feria

    def add_client_budget(
        self,
        nombre_feria: str,
        nombre_cliente: str,
        presupuesto: Presupuesto,
        fecha: date | None = None,
    ) -> Cliente:
        """Da de alta un cliente con su presupuesto.

        La feria se busca por nombre sin distinguir mayúsculas; si no
        existe, se crea en estado de planificación.
        """
        dataset = self._storage.load()
        feria = next(
            (f for f in dataset.ferias if f.nombre.lower() == nombre_feria.strip().lower()),
            None,
        )
        if feria is None:
            feria = Feria(
                id=slugify(nombre_feria),
                nombre=nombre_feria.strip().upper(),
                estado=EstadoFeria.PLANIFICACION,
                fecha=fecha,
            )
            dataset.ferias.append(feria)

        cliente = Cliente(
            id=slugify(nombre_cliente),
            nombre=nombre_cliente.strip().upper(),
            estado="Pending",
            presupuesto=presupuesto,
        )
        feria.clientes.append(cliente)

        self._guardar(dataset)
        self._logger.log_feria_changed(feria.id, f"cliente {cliente.id} añadido")
        return cliente

    def delete_client(self, feria_id: str, cliente_id: str) -> None:
        """Borra un cliente de una feria. Sus repartos en movimientos quedan
        como referencias obsoletas, que los informes tratan como cero."""
        dataset = self._storage.load()
        feria = self._feria(dataset, feria_id)
        if feria.buscar_cliente(cliente_id) is None:
            raise ClienteNoEncontradoError(feria_id, cliente_id)

        feria.clientes = [c for c in feria.clientes if c.id != cliente_id]

        self._guardar(dataset)
        self._logger.log_feria_changed(feria.id, f"cliente {cliente_id} eliminado")

    # --- Privados ---

    def _guardar(self, dataset: Dataset) -> None:
        self._storage.save(dataset)
        self._logger.log_dataset_saved(len(dataset.ferias))

    def _feria(self, dataset: Dataset, feria_id: str) -> Feria:
        feria = dataset.buscar_feria(feria_id)
        if feria is None:
            raise FeriaNoEncontradaError(feria_id)
        return feria

    def _clonar_cliente(self, cliente: Cliente) -> Cliente:
        marca = int(self._now().timestamp() * 1000)
        nuevo_id = f"{slugify(cliente.nombre)}-{marca}-{random.randint(0, 999)}"
        return replace(cliente, id=nuevo_id)

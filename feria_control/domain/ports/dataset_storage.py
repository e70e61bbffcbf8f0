"""
Puerto de salida: Almacenamiento del dataset.

El dataset se lee y se escribe ENTERO: no hay actualizaciones parciales,
ni bloqueos, ni fusión de cambios. Si dos operadores guardan a la vez,
gana el último.
"""

from abc import ABC, abstractmethod

from feria_control.domain.models.dataset import Dataset


class DatasetStorage(ABC):
    """Interfaz para cargar y guardar el dataset completo."""

    @abstractmethod
    def load(self) -> Dataset:
        """Carga la instantánea actual del dataset.

        Raises:
            PersistenciaError: Si el almacenamiento no se puede leer o su
                contenido no es un dataset válido.
        """
        ...

    @abstractmethod
    def save(self, dataset: Dataset) -> None:
        """Reemplaza el dataset almacenado por el recibido.

        Raises:
            PersistenciaError: Si no se pudo escribir.
        """
        ...

"""
Adaptador de almacenamiento: Dataset en un archivo JSON local.

Lee y escribe el documento completo. Para no dejar un archivo a medias si
la escritura falla, se escribe primero a un temporal en el mismo
directorio y después se reemplaza el original.
"""

import json
from decimal import Decimal
from pathlib import Path

from feria_control.adapters.storage.dataset_codec import dataset_from_dict, dataset_to_dict
from feria_control.domain.exceptions import PersistenciaError
from feria_control.domain.models.dataset import Dataset
from feria_control.domain.ports.dataset_storage import DatasetStorage


class JsonFileStorage(DatasetStorage):
    """Guarda el dataset como un único documento JSON."""

    def __init__(self, path: Path) -> None:
        """
        Args:
            path: Ruta del archivo. Si no existe, `load()` devuelve un
                  dataset vacío y `save()` lo crea (con sus directorios).
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Dataset:
        if not self._path.exists():
            return Dataset()

        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f, parse_float=Decimal)
        except OSError as e:
            raise PersistenciaError("carga", f"No se pudo leer '{self._path}': {e}") from e
        except json.JSONDecodeError as e:
            raise PersistenciaError("carga", f"JSON no válido en '{self._path}': {e}") from e

        try:
            return dataset_from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PersistenciaError(
                "carga", f"Estructura de dataset no válida en '{self._path}': {e!r}"
            ) from e

    def save(self, dataset: Dataset) -> None:
        temporal = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with temporal.open("w", encoding="utf-8") as f:
                json.dump(dataset_to_dict(dataset), f, ensure_ascii=False, indent=2)
            temporal.replace(self._path)
        except OSError as e:
            temporal.unlink(missing_ok=True)
            raise PersistenciaError("guardado", f"No se pudo escribir '{self._path}': {e}") from e

"""
Puertos (interfaces) del dominio.

Los puertos definen QUÉ necesita el dominio, sin decir CÓMO se implementa.
Cada puerto tiene uno o más adaptadores que lo implementan.

Uso:
    from feria_control.domain.ports import DatasetStorage, TableWriter
"""

from feria_control.domain.ports.dataset_storage import DatasetStorage
from feria_control.domain.ports.process_logger import ProcessLogger
from feria_control.domain.ports.table_writer import TableWriter

__all__ = [
    "DatasetStorage",
    "ProcessLogger",
    "TableWriter",
]

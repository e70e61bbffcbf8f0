"""
Configuración de la aplicación.

Se lee de variables de entorno, cargando antes un archivo `.env` si existe
(python-dotenv). Los flags de la línea de comandos tienen prioridad sobre
estos valores.

Variables:
    FERIAS_DB_PATH     Archivo JSON del dataset.       Defecto: data/db.json
    FERIAS_OUTPUT_DIR  Directorio de los informes.     Defecto: informes
    FERIAS_LOG_LEVEL   Nivel de logging.               Defecto: INFO
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

NIVELES_LOG = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class StorageConfig:
    """Configuración del almacenamiento del dataset."""

    db_path: Path = Path("data/db.json")


@dataclass(frozen=True)
class OutputConfig:
    """Configuración de las exportaciones."""

    output_dir: Path = Path("informes")


@dataclass(frozen=True)
class AppConfig:
    """Configuración completa de la aplicación."""

    storage: StorageConfig
    output: OutputConfig
    log_level: str = "INFO"


def load_config(env_file: str | Path | None = None) -> AppConfig:
    """Carga la configuración desde el entorno (y el `.env`, si hay).

    Las variables ya definidas en el entorno no se sobrescriben con las
    del `.env`.

    Raises:
        ValueError: Si FERIAS_LOG_LEVEL no es un nivel de logging válido.
    """
    load_dotenv(dotenv_path=env_file)

    log_level = os.getenv("FERIAS_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in NIVELES_LOG:
        raise ValueError(f"FERIAS_LOG_LEVEL no válido: '{log_level}'. Opciones: {', '.join(NIVELES_LOG)}")

    return AppConfig(
        storage=StorageConfig(db_path=Path(os.getenv("FERIAS_DB_PATH", "data/db.json"))),
        output=OutputConfig(output_dir=Path(os.getenv("FERIAS_OUTPUT_DIR", "informes"))),
        log_level=log_level,
    )

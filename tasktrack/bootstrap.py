"""
FILE: tasktrack/bootstrap.py
PURPOSE: Composition root shared by the CLI and the REPL
EXPORTS:
  - AppContext (dataclass: settings, datastore, store, workflow)
  - create_app(settings, environ, configure_logging) -> AppContext
DEPENDENCIES:
  - tasktrack.config (Settings)
  - tasktrack.logging_setup (setup_logging)
  - tasktrack.core.datastore (resolve_datastore)
  - tasktrack.core.repository (TaskStore)
  - tasktrack.core.workflow (TaskWorkflow)
NOTES:
  - Called once per process by the entry point; the resulting store is
    passed by reference, never rebuilt behind the caller's back
  - Settings and environment are injectable for tests
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .config import Settings
from .logging_setup import setup_logging
from .core.datastore import DatastoreConfig, resolve_datastore
from .core.repository import TaskStore
from .core.workflow import TaskWorkflow

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    datastore: DatastoreConfig
    store: TaskStore
    workflow: TaskWorkflow

    def close(self) -> None:
        self.store.close()


def create_app(
    settings: Optional[Settings] = None,
    environ: Optional[Mapping[str, str]] = None,
    configure_logging: bool = True,
) -> AppContext:
    """
    Wire settings, logging, store and workflow together.

    Raises:
        ConfigurationError: If no usable datastore can be set up
    """
    if settings is None:
        settings = Settings.from_env()

    if configure_logging:
        setup_logging(settings.log_level, settings.log_file)

    datastore = resolve_datastore(environ, settings.data_dir)
    store = TaskStore.from_config(datastore, echo=settings.sql_echo)
    workflow = TaskWorkflow(store)

    logger.debug("Application ready (datastore source=%s)", datastore.source)
    return AppContext(settings=settings, datastore=datastore, store=store, workflow=workflow)

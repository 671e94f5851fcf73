"""
FILE: tasktrack/core/datastore.py
PURPOSE: Resolve the datastore connection URL from environment variables
EXPORTS:
  - DatastoreConfig (dataclass)
  - resolve_datastore(environ, data_dir) -> DatastoreConfig
  - parse_cloud_url(raw) -> URL
  - build_discrete_url(host, database, port, sslmode) -> URL
  - local_default_url(data_dir) -> URL
DEPENDENCIES:
  - sqlalchemy.engine (URL building and parsing)
  - urllib.parse (stdlib, cloud URL splitting)
  - logging (stdlib)
NOTES:
  - Priority order, first match wins:
      1. native SQLAlchemy URL   (TASKTRACK_SQLALCHEMY_URL, SQLALCHEMY_DATABASE_URL)
      2. cloud postgres:// URL   (TASKTRACK_DATABASE_URL, DATABASE_URL)
      3. discrete host/db pieces (TASKTRACK_DB_HOST/NAME/PORT/SSLMODE, PG*)
      4. local SQLite file under the data directory
  - TASKTRACK_DB_USER / TASKTRACK_DB_PASSWORD (or PGUSER / PGPASSWORD)
    replace credentials from tiers 1-3, except for SQLite file URLs
  - A malformed value is logged and skipped, never fatal
  - Runs once per process; the caller keeps the resulting store
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence
from urllib.parse import parse_qsl, unquote, urlsplit

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from ..config import DEFAULT_DATA_DIR

logger = logging.getLogger(__name__)

# Environment variable names, checked in order within each tier
NATIVE_URL_VARS = ("TASKTRACK_SQLALCHEMY_URL", "SQLALCHEMY_DATABASE_URL")
CLOUD_URL_VARS = ("TASKTRACK_DATABASE_URL", "DATABASE_URL")
USER_VARS = ("TASKTRACK_DB_USER", "PGUSER")
PASSWORD_VARS = ("TASKTRACK_DB_PASSWORD", "PGPASSWORD")
HOST_VARS = ("TASKTRACK_DB_HOST", "PGHOST")
NAME_VARS = ("TASKTRACK_DB_NAME", "PGDATABASE")
PORT_VARS = ("TASKTRACK_DB_PORT", "PGPORT")
SSLMODE_VARS = ("TASKTRACK_DB_SSLMODE", "PGSSLMODE")

CLOUD_SCHEMES = ("postgres", "postgresql")
DRIVER_NAME = "postgresql+psycopg2"
DEFAULT_PORT = 5432
DEFAULT_SSLMODE = "require"
LOCAL_DB_FILENAME = "tasktrack.db"

# Where the URL came from
SOURCE_NATIVE = "native-url"
SOURCE_CLOUD = "cloud-url"
SOURCE_DISCRETE = "discrete"
SOURCE_LOCAL = "local-default"


@dataclass(frozen=True)
class DatastoreConfig:
    """Resolved connection URL plus the tier that produced it."""

    url: URL
    source: str

    @property
    def backend(self) -> str:
        return self.url.get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    def display_url(self) -> str:
        """URL with the password masked, safe for logs and output."""
        return self.url.render_as_string(hide_password=True)


def _first_env(environ: Mapping[str, str], names: Sequence[str]) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _parse_port(raw) -> int:
    port = int(raw)
    if not 0 < port < 65536:
        raise ValueError(f"port {port} out of range")
    return port


def parse_cloud_url(raw: str) -> URL:
    """
    Rewrite a generic cloud URL into the native driver format.

    Example:
        postgres://u:p@db.example.com:6543/app
        -> postgresql+psycopg2://u:p@db.example.com:6543/app?sslmode=require

    Raises:
        ValueError: Unsupported scheme, missing host or database, bad port
    """
    parts = urlsplit(raw)
    if parts.scheme.lower() not in CLOUD_SCHEMES:
        raise ValueError(f"unsupported scheme '{parts.scheme}'")
    if not parts.hostname:
        raise ValueError("missing host")

    database = unquote(parts.path.lstrip("/"))
    if not database:
        raise ValueError("missing database name")

    port = _parse_port(parts.port) if parts.port is not None else DEFAULT_PORT

    query = dict(parse_qsl(parts.query))
    query.setdefault("sslmode", DEFAULT_SSLMODE)

    return URL.create(
        DRIVER_NAME,
        username=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
        host=parts.hostname,
        port=port,
        database=database,
        query=query,
    )


def build_discrete_url(
    host: str,
    database: str,
    port: Optional[str] = None,
    sslmode: Optional[str] = None,
) -> URL:
    """
    Assemble a native URL from individual connection pieces.

    Raises:
        ValueError: If the port is not a valid number
    """
    return URL.create(
        DRIVER_NAME,
        host=host,
        port=_parse_port(port) if port else DEFAULT_PORT,
        database=database,
        query={"sslmode": sslmode or DEFAULT_SSLMODE},
    )


def local_default_url(data_dir: Path) -> URL:
    """SQLite file bundled with the local install."""
    return URL.create("sqlite", database=str(Path(data_dir) / LOCAL_DB_FILENAME))


def _apply_credentials(url: URL, environ: Mapping[str, str]) -> URL:
    user = _first_env(environ, USER_VARS)
    password = _first_env(environ, PASSWORD_VARS)
    if user is not None:
        url = url.set(username=user)
    if password is not None:
        url = url.set(password=password)
    return url


def _from_native(environ: Mapping[str, str]) -> Optional[URL]:
    raw = _first_env(environ, NATIVE_URL_VARS)
    if raw is None:
        return None
    try:
        return make_url(raw)
    except (ArgumentError, ValueError) as e:
        logger.warning("Ignoring malformed native database URL: %s", e)
        return None


def _from_cloud(environ: Mapping[str, str]) -> Optional[URL]:
    raw = _first_env(environ, CLOUD_URL_VARS)
    if raw is None:
        return None
    try:
        return parse_cloud_url(raw)
    except ValueError as e:
        logger.warning("Ignoring malformed cloud database URL: %s", e)
        return None


def _from_discrete(environ: Mapping[str, str]) -> Optional[URL]:
    host = _first_env(environ, HOST_VARS)
    database = _first_env(environ, NAME_VARS)
    if host is None or database is None:
        return None
    try:
        return build_discrete_url(
            host,
            database,
            port=_first_env(environ, PORT_VARS),
            sslmode=_first_env(environ, SSLMODE_VARS),
        )
    except ValueError as e:
        logger.warning("Ignoring discrete database settings: %s", e)
        return None


def resolve_datastore(
    environ: Optional[Mapping[str, str]] = None,
    data_dir: Optional[Path] = None,
) -> DatastoreConfig:
    """
    Decide which database to connect to.

    Args:
        environ: Environment mapping (defaults to os.environ)
        data_dir: Directory holding the local fallback database
                  (defaults to the settings data directory)

    Returns:
        DatastoreConfig for the first tier that yields a usable URL
    """
    if environ is None:
        environ = os.environ

    tiers = (
        (SOURCE_NATIVE, _from_native),
        (SOURCE_CLOUD, _from_cloud),
        (SOURCE_DISCRETE, _from_discrete),
    )
    for source, resolver in tiers:
        url = resolver(environ)
        if url is not None:
            if url.get_backend_name() != "sqlite":
                url = _apply_credentials(url, environ)
            config = DatastoreConfig(url=url, source=source)
            logger.info("Datastore resolved from %s: %s", source, config.display_url())
            return config

    if data_dir is None:
        data_dir = DEFAULT_DATA_DIR

    config = DatastoreConfig(url=local_default_url(data_dir), source=SOURCE_LOCAL)
    logger.info("No datastore configured, using local default: %s", config.display_url())
    return config

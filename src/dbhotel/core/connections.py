"""Connection helpers for hotel schemas.

Schemas advertise JDBC style urls. This module translates them into
SQLAlchemy urls and performs one-shot connection checks.

`create_data_source` is the engine factory for `DatabaseInstance`
implementations: a backend builds one pooled engine per schema it serves
with it, and turns on the `_ORACLE_SCRIPT` session hook for Oracle
container databases that reject schema names without a C## prefix.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from dbhotel.core.schemas import ConnectionVerification

logger = logging.getLogger(__name__)

ORACLE_SCRIPT_INIT_SQL = 'alter session set "_ORACLE_SCRIPT"=true'

# jdbc:oracle:thin:@host:port/service, @//host:port/service or @host:port:SID
_ORACLE_THIN_RE = re.compile(
    r"^oracle:thin:@(?://)?(?P<host>[^:/]+)(?::(?P<port>\d+))?(?P<sep>[:/])(?P<db>[^?]+)$"
)


def to_sqlalchemy_url(
    jdbc_url: str,
    username: str | None,
    password: str | None,
    *,
    read_only: bool = False,
) -> URL:
    """
    Translate a JDBC url into a SQLAlchemy url with the given credentials.

    Supported forms:
      - jdbc:oracle:thin:@host:port/service (optionally @//host...)
      - jdbc:oracle:thin:@host:port:SID
      - jdbc:postgresql://host:port/database
      - jdbc:sqlite:path

    With `read_only` a sqlite file is opened in `mode=ro`, so a missing
    file is an error instead of being created. Other backends ignore it.

    Raises:
        ValueError: If the url is not a supported JDBC url.
    """
    raw = jdbc_url.strip()
    if not raw.startswith("jdbc:"):
        raise ValueError(f"Not a JDBC url: '{jdbc_url}'")
    rest = raw[len("jdbc:") :]

    if rest.startswith("oracle:"):
        m = _ORACLE_THIN_RE.match(rest)
        if not m:
            raise ValueError(f"Unsupported Oracle JDBC url: '{jdbc_url}'")
        port = int(m.group("port")) if m.group("port") else 1521
        if m.group("sep") == "/":
            return URL.create(
                "oracle+oracledb",
                username=username,
                password=password,
                host=m.group("host"),
                port=port,
                query={"service_name": m.group("db")},
            )
        return URL.create(
            "oracle+oracledb",
            username=username,
            password=password,
            host=m.group("host"),
            port=port,
            database=m.group("db"),
        )

    if rest.startswith("postgresql:"):
        return make_url(rest).set(username=username, password=password)

    if rest.startswith("sqlite:"):
        path = rest[len("sqlite:") :]
        if read_only and path:
            return URL.create(
                "sqlite", database=f"file:{path}", query={"mode": "ro", "uri": "true"}
            )
        return URL.create("sqlite", database=path or None)

    raise ValueError(f"Unsupported JDBC url: '{jdbc_url}'")


def _enable_oracle_script(dbapi_connection, connection_record) -> None:
    """Allow schema names without the C## prefix on container databases."""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute(ORACLE_SCRIPT_INIT_SQL)
    finally:
        cursor.close()


def create_data_source(
    jdbc_url: str,
    username: str | None,
    password: str | None,
    *,
    oracle_script_required: bool = False,
    pool_size: int | None = 2,
    read_only: bool = False,
) -> Engine:
    """
    Create an engine for a schema.

    Args:
        jdbc_url: JDBC url of the schema.
        username: User to connect as.
        password: Password of the user.
        oracle_script_required: Run `ORACLE_SCRIPT_INIT_SQL` on every new
            connection. Some Oracle installations (for example the default
            Docker images) need it to create schemas without a C## prefix.
        pool_size: Size of the connection pool, or None for no pooling.
        read_only: Never create a missing sqlite database file.
    """
    url = to_sqlalchemy_url(jdbc_url, username, password, read_only=read_only)

    if pool_size is None:
        engine = create_engine(url, poolclass=NullPool)
    elif url.get_backend_name() == "sqlite":
        engine = create_engine(url, pool_size=pool_size)
    else:
        engine = create_engine(url, pool_size=pool_size, max_overflow=0)

    if oracle_script_required:
        event.listen(engine, "connect", _enable_oracle_script)
    return engine


def verify_connection(jdbc_url: str, username: str, password: str) -> ConnectionVerification:
    """
    Open one connection to the schema and report the outcome.

    No retries: a failure is reported as-is. Driver and url errors are
    returned in the result instead of being raised. The check never
    creates anything on the target.
    """
    try:
        engine = create_data_source(
            jdbc_url, username, password, pool_size=None, read_only=True
        )
    except (SQLAlchemyError, ValueError, ImportError) as exc:
        logger.debug("Could not build engine for %s: %s", jdbc_url, exc)
        return ConnectionVerification(False, str(exc))

    try:
        with engine.connect():
            pass
    except DBAPIError as exc:
        logger.debug("Connection to %s failed: %s", jdbc_url, exc)
        return ConnectionVerification(False, str(exc.orig))
    except SQLAlchemyError as exc:
        logger.debug("Connection to %s failed: %s", jdbc_url, exc)
        return ConnectionVerification(False, str(exc))
    finally:
        engine.dispose()

    return ConnectionVerification(True, "successful")

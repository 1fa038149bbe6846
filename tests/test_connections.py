import pytest
from sqlalchemy import event

from dbhotel.core.connections import (
    _enable_oracle_script,
    create_data_source,
    to_sqlalchemy_url,
    verify_connection,
)


def test_oracle_service_name_url():
    url = to_sqlalchemy_url("jdbc:oracle:thin:@db1.example.com:1521/ORCLPDB", "app", "pw")

    assert url.drivername == "oracle+oracledb"
    assert (url.host, url.port, url.username, url.password) == (
        "db1.example.com",
        1521,
        "app",
        "pw",
    )
    assert url.query["service_name"] == "ORCLPDB"


def test_oracle_easy_connect_with_slashes():
    url = to_sqlalchemy_url("jdbc:oracle:thin:@//db1.example.com/ORCLPDB", "app", "pw")

    assert url.host == "db1.example.com"
    assert url.port == 1521
    assert url.query["service_name"] == "ORCLPDB"


def test_oracle_sid_url():
    url = to_sqlalchemy_url("jdbc:oracle:thin:@db1.example.com:1522:ORCL", "app", "pw")

    assert url.port == 1522
    assert url.database == "ORCL"
    assert "service_name" not in url.query


def test_postgres_url():
    url = to_sqlalchemy_url("jdbc:postgresql://pg.example.com:5432/app", "app", "pw")

    assert url.get_backend_name() == "postgresql"
    assert (url.host, url.port, url.database) == ("pg.example.com", 5432, "app")
    assert url.username == "app"


@pytest.mark.parametrize(
    "value",
    ["postgresql://pg/app", "jdbc:mysql://h/db", "jdbc:oracle:thin:@(DESCRIPTION=...)"],
)
def test_unsupported_urls_are_rejected(value: str):
    with pytest.raises(ValueError):
        to_sqlalchemy_url(value, "u", "p")


def test_create_data_source_uses_small_pool(tmp_path):
    engine = create_data_source(f"jdbc:sqlite:{tmp_path / 'a.db'}", None, None)
    try:
        assert engine.pool.size() == 2
        assert not event.contains(engine, "connect", _enable_oracle_script)
    finally:
        engine.dispose()


def test_create_data_source_installs_oracle_script_hook(tmp_path):
    engine = create_data_source(
        f"jdbc:sqlite:{tmp_path / 'a.db'}", None, None, oracle_script_required=True
    )
    try:
        assert event.contains(engine, "connect", _enable_oracle_script)
    finally:
        engine.dispose()


def test_verify_connection_success(tmp_path):
    db_file = tmp_path / "ok.db"
    db_file.touch()

    result = verify_connection(f"jdbc:sqlite:{db_file}", "u", "p")

    assert result.has_succeeded is True
    assert result.message == "successful"


def test_read_only_sqlite_url_uses_uri_mode(tmp_path):
    db_file = tmp_path / "a.db"

    url = to_sqlalchemy_url(f"jdbc:sqlite:{db_file}", None, None, read_only=True)

    assert url.database == f"file:{db_file}"
    assert url.query == {"mode": "ro", "uri": "true"}


def test_verify_connection_does_not_create_missing_sqlite_file(tmp_path):
    db_file = tmp_path / "absent.db"

    result = verify_connection(f"jdbc:sqlite:{db_file}", "u", "p")

    assert result.has_succeeded is False
    assert "unable to open database file" in result.message
    assert not db_file.exists()


def test_verify_connection_never_raises_for_bad_urls():
    result = verify_connection("not-a-url", "u", "p")

    assert result.has_succeeded is False
    assert "Not a JDBC url" in result.message

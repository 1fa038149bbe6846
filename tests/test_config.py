import pytest

import fakes
from fakes import FakeExternalManager, FakeInstance, make_schema

from dbhotel.core.config import HotelSettings, build_service, load_backend
from dbhotel.core.errors import ConfigError
from dbhotel.core.hotel import EXTERNAL
from dbhotel.core.registry import DatabaseHotelAdmin


def test_from_env_defaults():
    settings = HotelSettings.from_env({})

    assert settings == HotelSettings(backend=None, max_workers=None, log_level="WARNING")


def test_from_env_reads_values():
    settings = HotelSettings.from_env(
        {
            "DBHOTEL_BACKEND": " mypkg.hotel:build ",
            "DBHOTEL_MAX_WORKERS": "4",
            "DBHOTEL_LOG_LEVEL": "debug",
        }
    )

    assert settings.backend == "mypkg.hotel:build"
    assert settings.max_workers == 4
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["", "zero", "0", "-3"])
def test_from_env_ignores_unusable_max_workers(raw: str):
    assert HotelSettings.from_env({"DBHOTEL_MAX_WORKERS": raw}).max_workers is None


def test_with_overrides_rejects_unknown_log_level():
    with pytest.raises(ConfigError, match="log level"):
        HotelSettings().with_overrides(log_level="chatty")


def test_with_overrides_only_applies_given_values():
    settings = HotelSettings(backend="a:b", log_level="INFO").with_overrides(backend=None)

    assert settings.backend == "a:b"
    assert settings.log_level == "INFO"


@pytest.mark.parametrize(
    "reference,match",
    [
        (None, "No backend configured"),
        ("fakes", "package.module:factory"),
        ("no_such_module_xyz:build", "Cannot import"),
        ("fakes:missing", "not callable"),
        ("fakes:not_an_admin", "expected DatabaseHotelAdmin"),
    ],
)
def test_load_backend_errors(reference, match):
    with pytest.raises(ConfigError, match=match):
        load_backend(reference)


def test_build_service_wires_external_manager(monkeypatch):
    external = FakeExternalManager()
    admin = DatabaseHotelAdmin([FakeInstance("a")], external)
    monkeypatch.setattr(fakes, "CURRENT_ADMIN", admin)

    service = build_service(HotelSettings(backend="fakes:current_admin", max_workers=3))

    assert service.registry is admin
    assert service.external_schema_manager is external
    assert service.max_workers == 3


def test_manager_registered_after_build_is_used(monkeypatch):
    admin = DatabaseHotelAdmin([FakeInstance("a", make_schema("s1"))])
    monkeypatch.setattr(fakes, "CURRENT_ADMIN", admin)
    service = build_service(HotelSettings(backend="fakes:current_admin"))
    assert service.external_schema_manager is None

    external = FakeExternalManager(make_schema("s2"))
    admin.register_external_schema_manager(external)

    assert service.find_schema_by_id("s2").owner is EXTERNAL
    registered = service.register_external_schema(
        "app", "pw", "jdbc:postgresql://ext/app", {"env": "dev"}
    )
    assert external.calls == [("register", registered.id)]

from fakes import make_schema

import questionary

from dbhotel.cli.tui import (
    _MAX_SCHEMA_NAME_WIDTH,
    _schema_choice_title,
    _schema_choices,
    _server_of,
    _truncate,
)


def test_schema_choice_title_aligns_id_column():
    first = _schema_choice_title(make_schema("id-1", name="ALPHA"), name_width=12)
    second = _schema_choice_title(make_schema("id-22", name="BETA"), name_width=12)

    assert first.startswith("ALPHA")
    assert second.startswith("BETA")
    assert first.index("(id: ") == second.index("(id: ")


def test_schema_choice_title_truncates_long_names():
    long_name = "X" * (_MAX_SCHEMA_NAME_WIDTH + 10)
    rendered = _schema_choice_title(
        make_schema("id-9", name=long_name), name_width=_MAX_SCHEMA_NAME_WIDTH
    )

    assert "..." in rendered
    assert "(id: id-9)" in rendered
    assert len(_truncate(long_name, _MAX_SCHEMA_NAME_WIDTH)) == _MAX_SCHEMA_NAME_WIDTH


def test_schema_choice_title_shows_labels():
    rendered = _schema_choice_title(
        make_schema("id-1", name="ALPHA", labels={"team": "t1", "env": "dev"}), name_width=5
    )

    assert rendered == "ALPHA  (id: id-1)  env=dev, team=t1"


def test_server_of_reads_host_and_port_from_jdbc_url():
    oracle = make_schema("s1", jdbc_url="jdbc:oracle:thin:@ora1.example.com:1522/PDB")
    postgres = make_schema("s2", jdbc_url="jdbc:postgresql://pg1.example.com/app")
    broken = make_schema("s3", jdbc_url="mysql://nope")

    assert _server_of(oracle) == "ora1.example.com:1522"
    assert _server_of(postgres) == "pg1.example.com"
    assert _server_of(broken) == "unknown server"


def test_schema_choices_group_by_server_and_disable_inactive():
    schemas = [
        make_schema("b1", name="ZED", jdbc_url="jdbc:oracle:thin:@b.example.com:1521/X"),
        make_schema("a1", name="MID", jdbc_url="jdbc:oracle:thin:@a.example.com:1521/X"),
        make_schema(
            "a2", name="OLD", active=False, jdbc_url="jdbc:oracle:thin:@a.example.com:1521/Y"
        ),
        make_schema("b2", name="ALPHA", jdbc_url="jdbc:oracle:thin:@b.example.com:1521/Y"),
    ]

    entries = _schema_choices(schemas)

    separators = [e.title for e in entries if isinstance(e, questionary.Separator)]
    assert separators == ["── a.example.com:1521 ──", "── b.example.com:1521 ──"]
    choices = [e for e in entries if not isinstance(e, questionary.Separator)]
    assert [c.value.id for c in choices] == ["a1", "a2", "b2", "b1"]
    assert [c.disabled for c in choices] == [None, "inactive", None, None]

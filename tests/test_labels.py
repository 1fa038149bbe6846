from fakes import make_schema

from dbhotel.core.labels import (
    AndSelector,
    LabelSelector,
    find_all_matching_schemas,
    matches_labels,
)


def test_label_selector_exact_value():
    selector = LabelSelector("env", "dev")

    assert selector.matches({"env": "dev", "app": "x"}) is True
    assert selector.matches({"env": "prod"}) is False
    assert selector.matches({}) is False


def test_label_selector_without_value_requires_key_only():
    selector = LabelSelector("env")

    assert selector.matches({"env": "anything"}) is True
    assert selector.matches({"env": None}) is True
    assert selector.matches({"app": "x"}) is False


def test_empty_and_selector_matches_everything():
    assert AndSelector([]).matches({}) is True
    assert matches_labels({"a": "1"}, {}) is True
    assert matches_labels(None, {}) is True


def test_matches_labels_requires_all_entries():
    labels = {"env": "dev", "app": "x"}

    assert matches_labels(labels, {"env": "dev", "app": None}) is True
    assert matches_labels(labels, {"env": "dev", "team": None}) is False
    assert matches_labels(None, {"env": None}) is False


def test_find_all_matching_schemas():
    schemas = [
        make_schema("s1", labels={"env": "dev"}),
        make_schema("s2", labels={"env": "prod"}),
        make_schema("s3"),
    ]

    assert {s.id for s in find_all_matching_schemas(schemas, {"env": "dev"})} == {"s1"}
    assert {s.id for s in find_all_matching_schemas(schemas, {"env": None})} == {"s1", "s2"}
    assert len(find_all_matching_schemas(schemas, {})) == 3

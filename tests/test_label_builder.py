import pytest

from dbhotel.cli.common.label_builder import parse_label_filter, parse_labels


def test_parse_label_filter_supports_key_only():
    assert parse_label_filter(["env=dev", "app"]) == {"env": "dev", "app": None}


def test_parse_label_filter_keeps_equals_in_value():
    assert parse_label_filter(["expr=a=b"]) == {"expr": "a=b"}


def test_parse_labels_requires_values():
    assert parse_labels(["env=dev", "empty="]) == {"env": "dev", "empty": ""}

    with pytest.raises(ValueError, match="key=value"):
        parse_labels(["env"])


@pytest.mark.parametrize("value", ["=dev", " =x", ""])
def test_empty_keys_are_rejected(value: str):
    with pytest.raises(ValueError):
        parse_label_filter([value])

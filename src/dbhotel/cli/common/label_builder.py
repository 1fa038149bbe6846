"""Label parsing for command line options.

Commands accept labels as repeated `--label` options. Filters accept
`key=value` (exact match) or a bare `key` (key must exist). Label sets
that are written to a schema always need `key=value`.
"""

from typing import Iterable


def _split(label: str) -> tuple[str, str | None]:
    key, sep, value = label.partition("=")
    key = key.strip()
    if not key:
        raise ValueError(f"Invalid label: '{label}' (expected key=value)")
    return key, (value.strip() if sep else None)


def parse_label_filter(labels: Iterable[str]) -> dict[str, str | None]:
    """
    Build a label filter from `key=value` / `key` strings.

    Raises:
        ValueError: If a label has an empty key.
    """
    return dict(_split(label) for label in labels)


def parse_labels(labels: Iterable[str]) -> dict[str, str]:
    """
    Build a label set from `key=value` strings.

    Raises:
        ValueError: If a label is not in the form `key=value`.
    """
    parsed: dict[str, str] = {}
    for label in labels:
        key, value = _split(label)
        if value is None:
            raise ValueError(f"Invalid label: '{label}' (expected key=value)")
        parsed[key] = value
    return parsed

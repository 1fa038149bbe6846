"""Questionary / prompt_toolkit styles for dbhotel prompts.

Both styles share a base and differ only in their accent colour: green
for schema pickers, red for destructive confirmations.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

_MUTED = "ansibrightblack"


def _prompt_style(accent: str, question: str) -> Style:
    return Style.from_dict(
        {
            "question": f"bold {question}",
            "answer": f"bold {accent}",
            "pointer": f"bold {accent}",
            "highlighted": f"bold {accent}",
            "selected": f"bold {accent}",
            "checkbox": _MUTED,
            "checkbox-selected": f"bold {accent}",
            "separator": f"italic {_MUTED}",
            "instruction": _MUTED,
            "disabled": f"{_MUTED} strike",
            "error": "bold ansired",
        }
    )


QUESTIONARY_STYLE_SELECT = _prompt_style("ansibrightgreen", "ansibrightcyan")
QUESTIONARY_STYLE_DANGER = _prompt_style("ansibrightred", "ansibrightred")

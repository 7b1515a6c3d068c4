"""Wildcard pattern translation shared by the memo layer and backends.

Invalidation patterns use ``*`` as the only wildcard. They are translated to
SQL ``LIKE`` patterns (``%`` wildcard, ``\\`` escape) for backing stores, and
the in-memory side compiles the very same ``LIKE`` pattern to a regular
expression, so both sides always agree on what matches.
"""

import re

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape ``LIKE`` metacharacters in literal text."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def glob_to_like(pattern: str) -> str:
    """Translate a ``*`` glob into an escaped ``LIKE`` pattern."""
    return "%".join(escape_like(part) for part in pattern.split("*"))


def like_to_regex(like: str) -> re.Pattern[str]:
    """Compile an escaped ``LIKE`` pattern into an anchored regex."""
    parts = []
    chars = iter(like)
    for char in chars:
        if char == LIKE_ESCAPE:
            parts.append(re.escape(next(chars, LIKE_ESCAPE)))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)

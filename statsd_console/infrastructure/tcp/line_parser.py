from __future__ import annotations

from typing import List


def parse_line(raw: bytes) -> List[str]:
    """Split one console line into tokens.

    The first token is the command name, the rest are positional arguments.
    Tokens are whitespace separated with no quoting or escaping, so
    `delcounters "a b"` yields the arguments `"a` and `b"`. A blank line
    yields an empty list.
    """
    return raw.decode("utf-8", errors="replace").split()

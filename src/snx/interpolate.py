## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from typing import Callable

from .types import Value
from .errors import SnxNameError, SnxSyntaxError


_NAME = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


def _escape(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')


def interpolate(text: str, lookup: Callable[[str], Value | None]) -> str:
    """Replace `${name}` inside string literals with the variable's textual value.

    Substituted text is escaped so it stays part of the surrounding literal; text outside
    of string literals is returned untouched.
    """
    if '${' not in text: return text

    result, i, in_string = [], 0, False
    while i < len(text):
        ch = text[i]
        if in_string and ch == '\\' and i + 1 < len(text):
            result.append(text[i:i+2])
            i += 2
            continue
        if in_string and text.startswith('${', i):
            if (close := text.find('}', i + 2)) == -1:
                raise SnxSyntaxError(f"Unterminated string interpolation `{text[i:]}`")
            name = text[i+2:close].strip()
            if not _NAME.fullmatch(name):
                raise SnxSyntaxError(f"Invalid interpolation name `{name}`")
            if (value := lookup(name)) is None:
                raise SnxNameError(f"Undefined variable '{name}' used in interpolation")
            result.append(_escape(value.text))
            i = close + 1
            continue
        if ch == '"':
            in_string = not in_string
        result.append(ch)
        i += 1
    return ''.join(result)

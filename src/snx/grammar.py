## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import functools
from typing import Iterator, Literal
from dataclasses import dataclass

from .errors import SnxSyntaxError


Style = Literal['end', 'brackets']
STYLES: tuple[str, ...] = ('end', 'brackets')

KEYWORDS = ('if', 'func', 'return', 'var', 'print', 'println', 'exec', 'input',
            'true', 'false', 'end', 'GOTO', 'END', 'STYLE')

NAME = r'[A-Za-z_][A-Za-z0-9_]*'

# Statement kinds, listed in the order lines are classified.
STATEMENTS = ('style', 'comment', 'terminate', 'blank', 'close', 'return', 'return_expr',
              'func', 'call', 'goto', 'if', 'declare', 'assign', 'print', 'exec')

_COMMON = {
    'style': r'^\s*STYLE\s*=\s*["\']?([A-Za-z]+)["\']?\s*$',
    'comment': r'^\s*#',
    'terminate': r'^\s*END\s*$',
    'blank': r'^\s*$',
    'return': r'^\s*return\s*;?\s*$',
    'return_expr': r'^\s*return\s+(.+?)\s*;?\s*$',
    'call': rf'^\s*(?!(?:{"|".join(KEYWORDS)})\b)({NAME})\s*\((.*)\)\s*$',
    'goto': r'^\s*GOTO\s+(-?\d+)\s*$',
    'declare': rf'^\s*var\s+({NAME})\s*=\s*(.*?)\s*$',
    'assign': rf'^\s*({NAME})\s*=(?!=)\s*(.*?)\s*$',
    'print': r'^\s*(println|print)(?:\s+|(?=\())(.*?)\s*$',
    'exec': r'^\s*exec\s+(.*?)\s*$',
}

_BLOCKS = {
    'brackets': {
        'if': r'^\s*if\s+(.*?)\s*\{\s*$',
        'func': rf'^\s*func\s+({NAME})\s*\((.*?)\)\s*\{{\s*$',
        'close': r'^\s*\}\s*$',
    },
    'end': {
        'if': r'^\s*if\s+(.*?)\s*$',
        'func': rf'^\s*func\s+({NAME})\s*\((.*?)\)\s*$',
        'close': r'^\s*end\s*$',
    },
}


@dataclass(frozen=True)
class Statement:
    kind: str
    groups: tuple[str, ...]


@dataclass(frozen=True)
class Grammar:
    """Line patterns for one block style; switching style means switching grammar."""
    style: Style
    patterns: dict[str, re.Pattern]

    def classify(self, line: str) -> Statement | None:
        for kind in STATEMENTS:
            if m := self.patterns[kind].match(line):
                return Statement(kind, m.groups())
        return None

    def is_opener(self, line: str) -> bool:
        return bool(self.patterns['if'].match(line) or self.patterns['func'].match(line))

    def block_events(self, line: str) -> Iterator[int]:
        """Yield +1 for every block opened and -1 for every block closed on this line, in order."""
        if self.style == 'end':
            if self.is_opener(line): yield +1
            elif self.patterns['close'].match(line): yield -1
            return

        if self.patterns['comment'].match(line): return
        in_string, escaped = False, False
        for ch in line:
            if in_string:
                if escaped: escaped = False
                elif ch == '\\': escaped = True
                elif ch == '"': in_string = False
            elif ch == '"': in_string = True
            elif ch == '{': yield +1
            elif ch == '}': yield -1


@functools.cache
def grammar_for(style: str) -> Grammar:
    if style not in STYLES:
        raise SnxSyntaxError(f"Unknown block style '{style}', expected one of: {', '.join(STYLES)}.")
    sources = _COMMON | _BLOCKS[style]
    return Grammar(style, {kind: re.compile(sources[kind]) for kind in STATEMENTS})


def split_arguments(text: str) -> list[str]:
    """Split a parameter or argument list on top-level commas, keeping strings and parentheses intact."""
    if not text.strip(): return []
    parts, current, depth, in_string, escaped = [], [], 0, False, False
    for ch in text:
        if in_string:
            if escaped: escaped = False
            elif ch == '\\': escaped = True
            elif ch == '"': in_string = False
        elif ch == '"': in_string = True
        elif ch == '(': depth += 1
        elif ch == ')': depth -= 1
        elif ch == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append(''.join(current).strip())
    return parts

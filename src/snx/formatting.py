## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Value, Error


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_value(value: Value) -> str:
    if isinstance(value, Error):
        return f"\033[33m{value.message}\033[0m"
    return value.literal


def format_banner(label: str) -> str:
    return f"\033[30;43m {label} \033[0m"


def format_source_context(lines: list[str], line: int, filename: str | None = None, radius: int = 2) -> str:
    """Render the lines around `line` (1-based, lines[0] being a sentinel) with the line itself highlighted."""
    header = f"\033[97m  File \"{filename or '<input>'}\", line {line}\033[0m"
    result = [header]
    for i in range(max(1, line - radius), min(len(lines), line + radius + 1)):
        color = '\033[97m' if i == line else '\033[90m'
        content = lines[i]
        if i == line and content.strip():
            content = f"\033[48;5;30m\033[1;97m{content}\033[0m"
        result.append(f"{color}{i:>5} |\033[0m {content}")
    return '\n'.join(result) + '\n'


def format_trace(step: int, pc: int, line: str, depth: int | None = None, calls: int | None = None, width: int = 72) -> str:
    text = line.strip() or '∅'
    if len(text) > width:
        text = text[:width-2] + ' …'
    if depth is not None:
        text = f"{text:<{width}}  \033[36m<=>\033[0m scope={depth} calls={calls}"
    return f"\033[90m{step:>3} :\033[0m {pc:>4} | {text}"

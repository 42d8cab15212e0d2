## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from pathlib import Path

from .grammar import Grammar
from .errors import SnxSyntaxError


class Listing:
    """Line-addressable source text; line 1 is the first line and index 0 is a blank sentinel.

    Every jump and block search resolves through this one index, and block ends are
    cached per (line, style) so loops do not rescan the same block.
    """

    def __init__(self, lines: list[str], filename: str | None = None):
        self.filename = filename
        self.lines: list[str] = [''] + [line.rstrip('\r\n') for line in lines]
        self._block_ends: dict[tuple[int, str], int] = {}

    @classmethod
    def from_source(cls, source: str, filename: str | None = None) -> "Listing":
        return cls(source.splitlines(), filename=filename)

    @classmethod
    def from_file(cls, path: str | Path) -> "Listing":
        path = Path(path)
        return cls.from_source(path.read_text(encoding='utf-8'), filename=str(path))

    def __len__(self) -> int:
        return len(self.lines) - 1

    def __getitem__(self, index: int) -> str:
        return self.lines[index] if 0 <= index < len(self.lines) else ''

    def __iter__(self):
        return iter(self.lines[1:])

    @property
    def end(self) -> int:
        """Address one past the last line; reaching it ends the program."""
        return len(self.lines)

    def is_address(self, index: int) -> bool:
        return 1 <= index <= self.end

    def extend(self, lines: list[str]) -> None:
        self.lines.extend(line.rstrip('\r\n') for line in lines)
        self._block_ends.clear()

    def find_block_end(self, start: int, grammar: Grammar) -> int:
        """Return the line index closing the block whose body starts at `start`."""
        key = (start, grammar.style)
        if (cached := self._block_ends.get(key)) is not None:
            return cached

        depth = 1
        for index in range(start, len(self.lines)):
            for delta in grammar.block_events(self.lines[index]):
                depth += delta
                if depth == 0:
                    self._block_ends[key] = index
                    return index
        raise SnxSyntaxError(f"Unmatched opening block starting near line {start - 1}.", line=start - 1)

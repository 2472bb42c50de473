from __future__ import annotations
import sys
from typing import Callable, Optional

DEBUG = False
def debug(*args, **kwargs):
    if not DEBUG: return
    print(*args, file=sys.stderr, **kwargs)


class Trace:
    """
    Formats dump lines and hands them to a write-line callable.

    Marker lines:  "<offset> Marker 0xFFxx: <description>"
    Field lines:   "<offset>" + (depth + 1) spaces + "<label> = <value> (<name>)"
    """
    def __init__(self, write_line: Callable[[str], None] = print):
        self.write_line = write_line

    def marker(self, offset: int, code: int, description: Optional[str] = None) -> None:
        line = f"{offset:08d} Marker 0xFF{code:02X}"
        if description is not None:
            line += f": {description}"
        self.write_line(line)

    def field(self, offset: int, label: str, value, name: Optional[str] = None, depth: int = 1) -> None:
        line = f"{offset:08d}{' ' * (depth + 1)}{label} = {value}"
        if name is not None:
            line += f" ({name})"
        self.write_line(line)

    def note(self, offset: int, text: str, depth: int = 1) -> None:
        self.write_line(f"{offset:08d}{' ' * (depth + 1)}{text}")

"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from pcgfmt.tokens import Token


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*: offset, type name, and value."""
    width = len(str(tokens[-1].offset)) if tokens else 1
    for tok in tokens:
        file.write(f"{tok.offset:>{width}} {tok.type.name} {tok.value!r}\n")

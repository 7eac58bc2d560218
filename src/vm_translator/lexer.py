from __future__ import annotations
import re

COMMENT_MARKER = "//"

INDEX_RE = re.compile(r"^[0-9]+$")
SYMBOL_RE = re.compile(r"^[A-Za-z_.$:][A-Za-z0-9_.$:]*$")

def strip_comment(line: str) -> str:
    """Remove a '//' comment (full-line or trailing) and surrounding whitespace."""
    return line.split(COMMENT_MARKER, 1)[0].strip()

def split_tokens(line: str):
    """Whitespace-separated tokens of an already comment-stripped line."""
    return line.split()

def is_index(token: str) -> bool:
    return bool(INDEX_RE.match(token))

def is_symbol(token: str) -> bool:
    """Valid assembler symbol: letters, digits, '_', '.', '$', ':'; no leading digit."""
    return bool(SYMBOL_RE.match(token))

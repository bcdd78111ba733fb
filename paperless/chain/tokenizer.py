"""Whitespace splitting that keeps quoted groups together."""
from __future__ import annotations

from typing import List

from paperless.chain.errors import ScriptSyntaxError

# Characters carrying the Unicode Quotation_Mark property.
QUOTATION_MARKS = frozenset(
    "\"'«»"
    "‘’‚‛“”„‟"
    "‹›⹂"
    "「」『』〝〞〟"
    "﹁﹂﹃﹄"
    "＂＇｢｣"
)


def split_quoted(line: str) -> List[str]:
    """Split ``line`` on whitespace, treating quoted spans as literal text.

    A quoted span opens at any quotation mark and closes at the next
    occurrence of the same character. The quote characters are dropped and
    whitespace inside the span is kept. ``''`` produces an empty token.

    Raises ``ScriptSyntaxError`` when a quote is never closed.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    quote = None

    for char in line:
        if quote is not None:
            if char == quote:
                quote = None
            else:
                current.append(char)
            continue
        if char in QUOTATION_MARKS:
            quote = char
            in_token = True
        elif char.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(char)
            in_token = True

    if quote is not None:
        raise ScriptSyntaxError(f"unterminated quote {quote!r} in {line!r}")
    if in_token:
        tokens.append("".join(current))
    return tokens


__all__ = ["QUOTATION_MARKS", "split_quoted"]

from __future__ import annotations

import re

_NEEDS_QUOTING = re.compile(r"[\s:]")


def escape_token(raw: str) -> str:
    """Quote a value so it survives as a single command-line token.

    Double quotes become ``\\"``; the token is wrapped in double quotes when it
    contains whitespace or a colon. No other character is treated specially.

    Backslashes are not doubled. A quoted value that ends in a backslash
    therefore ends in ``\\"``, which the .NET runtime reads as a literal quote,
    and the token runs on into whatever follows it. Values that need quoting
    must not end in a backslash (drop it, or end directory paths with ``/``).
    """
    escaped = raw.replace('"', '\\"')
    if _NEEDS_QUOTING.search(escaped):
        return f'"{escaped}"'
    return escaped


def unescape_token(token: str) -> str:
    # A wrapped token is the only kind that can start with a bare quote.
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        token = token[1:-1]
    return token.replace('\\"', '"')


def split_command_line(text: str) -> list[str]:
    """Split a raw argument string the way the .NET runtime parses it."""
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            start = i
            while i < n and text[i] == "\\":
                i += 1
            count = i - start
            if i < n and text[i] == '"':
                current.append("\\" * (count // 2))
                if count % 2:
                    current.append('"')
                    i += 1
                in_token = True
                continue
            current.append("\\" * count)
            in_token = True
            continue
        if ch == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            in_token = True
            i += 1
            continue
        if ch.isspace() and not in_quotes:
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
            i += 1
            continue
        current.append(ch)
        in_token = True
        i += 1
    if in_token:
        tokens.append("".join(current))
    return tokens

"""Parser for Java-style ``.properties`` payloads.

Packaging metadata embedded in archives (``pom.properties``) uses this
format. Only reading is supported.
"""

from __future__ import annotations

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"


def _logical_lines(text: str) -> list[str]:
    """Join continuation lines (odd number of trailing backslashes)."""
    lines: list[str] = []
    pending: str | None = None

    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue

        pending = None
        lines.append(line)

    if pending is not None:
        lines.append(pending)
    return lines


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            out.append(char)
            i += 1
            continue

        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uxxxx encoding: {text[i:]!r}")
            try:
                out.append(chr(int(digits, 16)))
            except ValueError:
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{digits}") from None
            i += 6
            continue

        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line at the first unescaped separator."""
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def parse_properties(data: bytes | str, encoding: str = "latin-1") -> dict[str, str]:
    """Parse a properties document into a dictionary.

    Later duplicate keys override earlier ones.

    Args:
        data: Raw bytes or already decoded text
        encoding: Encoding used when ``data`` is bytes (ISO-8859-1 by default)

    Returns:
        Mapping of keys to values

    Raises:
        ValueError: Malformed unicode escape
        UnicodeDecodeError: ``data`` cannot be decoded with ``encoding``
    """
    text = data.decode(encoding) if isinstance(data, bytes) else data

    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


__all__ = ["parse_properties"]

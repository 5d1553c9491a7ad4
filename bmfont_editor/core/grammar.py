"""
BMFont text grammar - one command per line followed by key=value pairs.

    info face="Arial" size=32 bold=0 italic=0 padding=0,0,0,0 spacing=1,1
    char id=65 x=10 y=0 width=8 height=10 xoffset=0 yoffset=2 xadvance=9 page=0 chnl=15

Values wrapped in double quotes are used verbatim, without escape processing.
"""

import re
from dataclasses import fields
from typing import List, NamedTuple, Tuple


# A token is a run of non-space characters; a quoted section may hold spaces.
# An unterminated quote swallows the rest of the line.
_TOKEN_RE = re.compile(r'(?:[^ "\r\n]|"[^"]*"?)+')


class ParsedLine(NamedTuple):
    """One tokenized description line."""
    command: str
    pairs: List[Tuple[str, str]]


def unquote(value: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_line(line: str) -> ParsedLine:
    """
    Split a description line into its command and ordered key/value pairs.

    Each token after the command is split on its first '='. Tokens without
    '=' are dropped, so malformed input never raises here; decoders simply
    never see it.
    """
    tokens = _TOKEN_RE.findall(line)
    if not tokens:
        return ParsedLine('', [])

    pairs = []
    for token in tokens[1:]:
        key, sep, value = token.partition('=')
        if not sep:
            continue
        pairs.append((key, unquote(value)))

    return ParsedLine(tokens[0], pairs)


def format_value(value, include_flags: bool = False):
    """
    Format one field value for a description line.

    Returns None for values that are not written: booleans (unless
    include_flags is set) and anything that is not a number, string or
    sequence of numbers.
    """
    if isinstance(value, bool):
        if include_flags:
            return '1' if value else '0'
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return ','.join(str(v) for v in value)
    return None


def pack_record(record, command: str, include_flags: bool = False) -> str:
    """
    Serialize a record dataclass as one description line.

    Fields are written in declaration order, named by their metadata
    "key" (e.g. lineHeight) or else the attribute name. Fields declared
    with metadata {"packed": False} (child lists, runtime images) are
    skipped.

    Args:
        record: Info, Common, Page or Char instance
        command: Line command name, e.g. "char"
        include_flags: Write booleans as 1/0 instead of omitting them

    Returns:
        The line, terminated by a single newline
    """
    tokens = []
    for f in fields(record):
        if not f.metadata.get('packed', True):
            continue
        value = format_value(getattr(record, f.name), include_flags)
        if value is None:
            continue
        tokens.append(f"{f.metadata.get('key', f.name)}={value}")
    return f"{command} {' '.join(tokens)}\n"

"""Front-matter handling for skill and agent documents.

Documents start with a ``---`` line, a YAML header, a closing ``---`` line,
and a markdown body. The header is parsed with PyYAML. Headers PyYAML
rejects (stray colons in unquoted values are the usual culprit) go through
a line-oriented fallback that understands ``key: value`` pairs, quoted
values, and folded (``>``, ``>-``) or literal (``|``, ``|-``) block
scalars. Lines the fallback does not recognise are ignored.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

DELIMITER = "---"

_KEY_LINE = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")
_BLOCK_INDICATOR = re.compile(r"^([>|])([+-]?)\s*$")


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """Split a document into (header, body).

    The header is the raw text between the delimiters, or None when the
    document has no front matter. The body is everything after the
    closing delimiter line, verbatim.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return None, text

    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return header, body

    return None, text


def parse_front_matter(header: str) -> Dict[str, Any]:
    """Parse a header block into an ordered mapping."""
    if not header.strip():
        return {}
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError:
        return _scan_front_matter(header)
    if not isinstance(data, dict):
        return _scan_front_matter(header)
    return {str(key): value for key, value in data.items()}


def read_document(text: str) -> Tuple[Dict[str, Any], str]:
    """Return (front matter, body) for a document's text."""
    header, body = split_front_matter(text)
    if header is None:
        return {}, body
    return parse_front_matter(header), body


def dump_front_matter(data: Dict[str, Any]) -> str:
    """Render a mapping as a delimited header, preserving key order."""
    rendered = yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=10000,
    )
    return f"{DELIMITER}\n{rendered}{DELIMITER}\n"


def _scan_front_matter(header: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    lines = header.splitlines()
    index = 0

    while index < len(lines):
        line = lines[index]
        index += 1

        if not line.strip() or line.lstrip().startswith("#") or line[:1].isspace():
            continue

        match = _KEY_LINE.match(line)
        if not match:
            continue

        key, value = match.group(1), match.group(2).strip()
        block = _BLOCK_INDICATOR.match(value)
        if block:
            collected: List[str] = []
            while index < len(lines) and (not lines[index].strip() or lines[index][:1].isspace()):
                collected.append(lines[index])
                index += 1
            result[key] = _join_block(collected, folded=block.group(1) == ">", chomp=block.group(2))
        else:
            result[key] = _unquote(value)

    return result


def _join_block(lines: List[str], folded: bool, chomp: str) -> str:
    while lines and not lines[-1].strip():
        lines.pop()
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    margin = min(indents) if indents else 0
    stripped = [line[margin:] if line.strip() else "" for line in lines]

    if folded:
        paragraphs: List[str] = []
        current: List[str] = []
        for line in stripped:
            if line:
                current.append(line.strip())
            else:
                paragraphs.append(" ".join(current))
                current = []
        paragraphs.append(" ".join(current))
        text = "\n".join(paragraphs)
    else:
        text = "\n".join(stripped)

    if chomp == "-" or not text:
        return text
    return text + "\n"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        inner = value[1:-1]
        if value[0] == "'":
            return inner.replace("''", "'")
        return inner.replace('\\"', '"')
    return value

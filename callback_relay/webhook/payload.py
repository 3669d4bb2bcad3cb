"""Turn a raw callback body into the text shown to browsers."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Tuple
from urllib.parse import parse_qsl

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"

# Bracketed form keys nest at most this deep; deeper segments stay literal.
MAX_DEPTH = 5

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def media_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_json(content_type: str | None) -> bool:
    mt = media_type(content_type)
    return mt == JSON_CONTENT_TYPE or mt.endswith("+json")


def is_form(content_type: str | None) -> bool:
    return media_type(content_type) == FORM_CONTENT_TYPE


def _split_key(key: str) -> List[str]:
    """``a[b][c]`` -> ``["a", "b", "c"]``.

    At most MAX_DEPTH bracket segments are split out; anything past that is
    kept as one literal segment (``"[f][g]"``).
    """
    m = _BRACKET_KEY.match(key)
    if not m:
        return [key]
    segments = _SEGMENT.findall(m.group(2))
    if len(segments) > MAX_DEPTH:
        rest = "".join(f"[{seg}]" for seg in segments[MAX_DEPTH:])
        segments = segments[:MAX_DEPTH] + [rest]
    return [m.group(1)] + segments


def _add_value(container: Dict[str, Any], name: str, value: Any) -> None:
    existing = container.get(name)
    if name not in container:
        container[name] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        container[name] = [existing, value]


def _insert(root: Dict[str, Any], path: List[str], value: str) -> bool:
    """Place value at path; ``""`` as the last segment appends to a list.

    Returns False without touching root when the path clashes with what is
    already there.
    """
    *parents, leaf = path
    if "" in parents:
        return False
    append = leaf == ""
    if append:
        parents, leaf = parents[:-1], parents[-1]

    node: Any = root
    for seg in parents:
        node = node.get(seg)
        if node is None:
            break
        if not isinstance(node, dict):
            return False
    else:
        if append and not isinstance(node.get(leaf, []), (list, str)):
            return False

    node = root
    for seg in parents:
        node = node.setdefault(seg, {})
    if append and leaf not in node:
        node[leaf] = []
    _add_value(node, leaf, value)
    return True


def parse_form(text: str) -> Dict[str, Any]:
    """Parse a urlencoded body with nested bracket keys.

    ``a[b]=1`` becomes ``{"a": {"b": "1"}}``; ``a[]=1&a[]=2`` and repeated
    plain keys become lists. Keys that would clash with an earlier scalar are
    kept verbatim at the top level.
    """
    out: Dict[str, Any] = {}
    pairs: List[Tuple[str, str]] = parse_qsl(text, keep_blank_values=True)
    for key, value in pairs:
        path = _split_key(key)
        if len(path) == 1 or not _insert(out, path, value):
            _add_value(out, key, value)
    return out


def pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_body(content_type: str | None, body: bytes) -> str:
    """Textual form of a callback body.

    Empty bodies render as ``{}``. JSON and form bodies are parsed and
    pretty-printed; anything that cannot be parsed or printed (including
    nesting too deep for the json module) is kept as raw text.
    """
    if not body or not body.strip():
        return pretty({})
    text = body.decode("utf-8", errors="replace")
    try:
        if is_json(content_type):
            return pretty(json.loads(text))
        if is_form(content_type):
            return pretty(parse_form(text))
    except (ValueError, RecursionError):
        return text
    return text

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from bapi_analyzer.errors import AnalysisError

logger = logging.getLogger(__name__)

_index_re = re.compile(r"\[\d+\]")


class JsonKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def kind_of(value: Any, path: str = "") -> JsonKind:
    # bool before number: bool is an int subclass
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if value is None:
        return JsonKind.NULL
    raise AnalysisError(f"Unexpected node of type {type(value).__name__}", path=path)


def display_value(value: Any) -> str:
    """String form of a JSON value as it appears in reports."""
    kind = kind_of(value)
    if kind is JsonKind.STRING:
        return value
    if kind is JsonKind.NULL:
        return "null"
    if kind is JsonKind.BOOLEAN:
        return "true" if value else "false"
    if kind is JsonKind.NUMBER:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class Match:
    node: Dict[str, Any]
    path: str


def normalize_path(path: str) -> str:
    return _index_re.sub("[]", path)


def _same_value(raw: Any, wanted: Any) -> bool:
    raw_kind = kind_of(raw)
    if raw_kind in (JsonKind.OBJECT, JsonKind.ARRAY):
        return False
    if raw_kind is not kind_of(wanted):
        return False
    return raw == wanted


def walk(root: Any, property_name: str, property_value: Optional[Any] = None) -> List[Match]:
    """
    Depth-first, pre-order search for objects carrying `property_name`.
    An object is inspected before its children, so parents precede their
    descendant matches in the returned list.
    """
    matches: List[Match] = []
    active: Set[int] = set()

    def visit(node: Any, path: str) -> None:
        kind = kind_of(node, path)
        if kind not in (JsonKind.OBJECT, JsonKind.ARRAY):
            return

        if id(node) in active:
            raise AnalysisError("Circular reference in document", path=path)
        active.add(id(node))

        if kind is JsonKind.ARRAY:
            for index, item in enumerate(node):
                visit(item, f"{path}[{index}]")
        else:
            if property_name in node:
                if property_value is None or _same_value(node[property_name], property_value):
                    matches.append(Match(node=node, path=path))
            for key, child in node.items():
                visit(child, f"{path}.{key}" if path else str(key))

        active.discard(id(node))

    try:
        visit(root, "")
    except RecursionError:
        raise AnalysisError("Document nesting is too deep to traverse") from None

    logger.debug("walk(%r, %r) found %s matches", property_name, property_value, len(matches))
    return matches

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bapi_analyzer.errors import AnalysisError
from bapi_analyzer.json_search import Match, display_value, normalize_path

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    pattern_groups: Dict[str, List[Match]] = field(default_factory=dict)
    value_frequency: Optional[Dict[str, int]] = None  # None when a search value was given
    co_occurrence: Dict[str, List[Any]] = field(default_factory=dict)

    @property
    def pattern_counts(self) -> Dict[str, int]:
        return {pattern: len(group) for pattern, group in self.pattern_groups.items()}


def _canonical(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _canonical(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_canonical(v) for v in value]
    return value


def _identity(value: Any) -> str:
    # canonical JSON keeps 1, true and "1" apart, folds 1.0 into 1 and makes objects comparable
    return json.dumps(_canonical(value), sort_keys=True, ensure_ascii=False)


def aggregate(
    matches: List[Match],
    property_name: str,
    property_value: Optional[Any] = None,
) -> AggregationResult:
    result = AggregationResult()
    if property_value is None:
        result.value_frequency = {}

    seen: Dict[str, set] = {}

    for m in matches:
        if not isinstance(m.node, dict) or property_name not in m.node:
            raise AnalysisError(f"Matched node does not carry '{property_name}'", path=m.path)

        result.pattern_groups.setdefault(normalize_path(m.path), []).append(m)

        if result.value_frequency is not None:
            value_str = display_value(m.node[property_name])
            result.value_frequency[value_str] = result.value_frequency.get(value_str, 0) + 1

        for prop, value in m.node.items():
            if prop == property_name:
                continue
            values = result.co_occurrence.setdefault(prop, [])
            ids = seen.setdefault(prop, set())
            key = _identity(value)
            if key not in ids:
                ids.add(key)
                values.append(value)

    logger.debug(
        "aggregate(%r): %s patterns, %s related properties",
        property_name, len(result.pattern_groups), len(result.co_occurrence),
    )
    return result

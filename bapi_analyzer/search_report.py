from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional

from pyuca import Collator

from bapi_analyzer.json_search import Match, display_value
from bapi_analyzer.search_aggregate import AggregationResult

SAMPLE_NODES = 5
SAMPLE_VALUES = 5
MAX_VALUE_CHARS = 100


@dataclass
class RenderedReport:
    main_report: str
    distinct_values_report: Optional[str] = None


def search_description(property_name: str, property_value: Optional[Any]) -> str:
    if property_value is not None:
        return f'"{property_name}": "{display_value(property_value)}"'
    return f'"{property_name}" (any value)'


def truncate_value(value: Any, limit: int = MAX_VALUE_CHARS) -> str:
    text = display_value(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def locale_sort_key(text: str):
    # Unicode collation, raw string breaks ties between equal collation keys
    return (_collator().sort_key(text), text)


def render_distinct_values(property_name: str, file_label: str, value_frequency: dict) -> str:
    lines = [f'Distinct values for "{property_name}" in {file_label}:', ""]
    for value in sorted(value_frequency, key=locale_sort_key):
        lines.append(f"{value}: {value_frequency[value]} occurrences")
    return "\n".join(lines)


def render(
    matches: List[Match],
    aggregation: AggregationResult,
    *,
    property_name: str,
    property_value: Optional[Any],
    file_label: str,
    timestamp: str,
) -> RenderedReport:
    out: List[str] = [
        "BAPI DEEP SEARCH REPORT",
        "=====================",
        "",
        f"File: {file_label}",
        f"Search: {search_description(property_name, property_value)}",
        f"Date: {timestamp}",
        "",
        f"Total matching nodes: {len(matches)}",
        "",
        "Nodes found by location:",
    ]
    for pattern, count in aggregation.pattern_counts.items():
        out.append(f"- {pattern}: {count} nodes")

    out.append("")
    out.append(f"Sample nodes (first {SAMPLE_NODES}):")
    for i, m in enumerate(matches[:SAMPLE_NODES], start=1):
        out.append("")
        out.append(f"[{i}] Path: {m.path}")
        out.append(json.dumps(m.node, indent=2, ensure_ascii=False))

    out += [
        "",
        "RELATED PROPERTY ANALYSIS",
        "=========================",
        "",
        f'Common properties found with "{property_name}":',
    ]
    for prop in sorted(aggregation.co_occurrence):
        values = aggregation.co_occurrence[prop]
        out.append(f"- {prop}: {len(values)} distinct values")
        for v in values[:SAMPLE_VALUES]:
            out.append(f"  - {truncate_value(v)}")
        if len(values) > SAMPLE_VALUES:
            out.append(f"  - ({len(values) - SAMPLE_VALUES} more values not shown)")

    out += [
        "",
        "POTENTIAL USAGE IN MAPPERSETTINGS.JSON:",
        f'If "{property_name}" represents a characteristic name, you might use it in mappersettings.json like:',
        "",
        '"SomeMapper": {',
        f'  "Characteristic": "{property_name}",',
        '  "Property": "THE_CONTAINING_PROPERTY" // Replace with actual containing property',
        "}",
        "",
    ]

    distinct = None
    if property_value is None and aggregation.value_frequency is not None:
        distinct = render_distinct_values(property_name, file_label, aggregation.value_frequency)

    return RenderedReport(main_report="\n".join(out), distinct_values_report=distinct)

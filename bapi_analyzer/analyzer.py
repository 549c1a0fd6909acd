from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional

from bapi_analyzer.errors import ParseError
from bapi_analyzer.json_search import Match, walk
from bapi_analyzer.search_aggregate import AggregationResult, aggregate
from bapi_analyzer.search_report import RenderedReport, render

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    matches: List[Match]
    aggregation: AggregationResult
    report: RenderedReport


def utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _reject_constant(name: str):
    raise ParseError(f"Invalid JSON constant {name}")


def parse_document(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e
    except RecursionError:
        raise ParseError("JSON document is nested too deeply to parse") from None


def analyze_document(
    document: Any,
    property_name: str,
    property_value: Optional[Any] = None,
    *,
    file_label: str,
    timestamp: Optional[str] = None,
) -> AnalysisResult:
    """
    walk -> aggregate -> render.
    The document is only read; every intermediate value is built fresh for this call.
    """
    if not property_name:
        raise ValueError("property_name must be a non-empty string")

    matches = walk(document, property_name, property_value)
    aggregation = aggregate(matches, property_name, property_value)
    report = render(
        matches,
        aggregation,
        property_name=property_name,
        property_value=property_value,
        file_label=file_label,
        timestamp=timestamp or utc_iso(),
    )

    logger.debug("analyzed %s for %r: %s matches", file_label, property_name, len(matches))
    return AnalysisResult(matches=matches, aggregation=aggregation, report=report)

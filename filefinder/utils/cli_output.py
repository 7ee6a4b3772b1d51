"""CLI JSON output wrapper adding schema metadata."""

from __future__ import annotations

import json
from typing import Any

from filefinder.utils.schema import build_schema_stamp


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "search_report").
        schema_version: Integer version for backward compatibility.
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.

    Example:
        >>> json_response("presets", 1, presets={})
        {
          "schema_id": "presets",
          "schema_version": 1,
          "producer": "filefinder-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "presets": {}
        }
    """
    stamp = build_schema_stamp(schema_id=schema_id, schema_version=schema_version)
    return json.dumps(stamp.apply(data), indent=2, default=str, ensure_ascii=False)

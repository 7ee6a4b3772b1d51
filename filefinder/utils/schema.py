"""Schema metadata stamping for JSON output."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from filefinder import __version__


@dataclass(frozen=True, slots=True)
class SchemaStamp:
    """Schema metadata applied to emitted JSON documents."""

    schema_id: str
    schema_version: int
    producer: str
    produced_at: str

    def apply(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``payload`` preceded by the schema metadata."""

        return {
            "schema_id": self.schema_id,
            "schema_version": self.schema_version,
            "producer": self.producer,
            "produced_at": self.produced_at,
            **payload,
        }


def build_schema_stamp(
    *,
    schema_id: str,
    schema_version: int,
    producer: str | None = None,
    produced_at: str | None = None,
) -> SchemaStamp:
    """Construct a :class:`SchemaStamp` for reuse across writers."""

    return SchemaStamp(
        schema_id=schema_id,
        schema_version=schema_version,
        producer=producer or f"filefinder-{__version__}",
        produced_at=produced_at or datetime.now(UTC).isoformat(),
    )

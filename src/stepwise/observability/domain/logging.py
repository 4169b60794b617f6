from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

# Ordered severities; sinks filter by position in this tuple.
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True, slots=True)
class LogMessage:
    # One structured event from discovery, scanning or execution.
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.level not in LOG_LEVELS:
            raise ValueError(f"LogMessage.level must be one of: {list(LOG_LEVELS)}")
        if not self.message:
            raise ValueError("LogMessage.message must be non-empty")

    def as_record(self) -> dict[str, object]:
        # JSON-ready shape shared by every sink; timestamps are rendered in UTC with a "Z" suffix.
        return {
            "level": self.level,
            "message": self.message,
            "timestamp": self.timestamp.astimezone(UTC).isoformat().replace("+00:00", "Z"),
            "fields": self.fields,
        }


def level_at_least(level: str, threshold: str) -> bool:
    return LOG_LEVELS.index(level) >= LOG_LEVELS.index(threshold)

"""Per-call host context: authenticated caller and current time."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OperationContext:
    caller: str | None
    timestamp: datetime

from __future__ import annotations
from typing import TypedDict, Callable
from enum import Enum
from dataclasses import dataclass

from .errors import ValidationErrorKind

# --- TypedDicts ---
# Keys mirror the collector's wire format, hence the camelCase.
SubmissionDocument = TypedDict(
    "SubmissionDocument",
    {
        "labelValue": str,
        "typeValue": str,
        "required": bool,
        "defaultValue": str,
        "choices": list[str],
        "order": str,
    },
)

class ReplayFailure(TypedDict):
    source: str | None
    choice: str
    choice_index: int
    kind: ValidationErrorKind
    reason: str

class SubmissionStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"

#--- Dataclasses ---
@dataclass(frozen=True)
class SubmissionResult:
    status: SubmissionStatus
    url: str
    status_code: int | None = None
    attempts: int = 1
    error: str | None = None
    body: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.OK

SubmissionCallback = Callable[[SubmissionResult], None]

"""Structured diagnostics collected while resolving a document.

Resolution warnings never raise. Functions that may substitute a default
return a :class:`Resolved` value carrying the diagnostics they produced, and
the caller merges them into the document's :class:`DiagnosticLog`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    code: str
    message: str
    element_id: str | None = None

    @classmethod
    def error(cls, code: str, message: str, element_id: str | None = None) -> Diagnostic:
        return cls(Severity.ERROR, code, message, element_id)

    @classmethod
    def warning(cls, code: str, message: str, element_id: str | None = None) -> Diagnostic:
        return cls(Severity.WARNING, code, message, element_id)

    @classmethod
    def info(cls, code: str, message: str, element_id: str | None = None) -> Diagnostic:
        return cls(Severity.INFO, code, message, element_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "element_id": self.element_id,
        }


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A resolved value plus the diagnostics raised while producing it."""

    value: T
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not any(d.severity is Severity.ERROR for d in self.diagnostics)

    def merge_into(self, log: DiagnosticLog) -> T:
        """Append this result's diagnostics to ``log`` and return the value."""
        log.extend(self.diagnostics)
        return self.value


@dataclass
class DiagnosticLog:
    """Per-document collection of diagnostics.

    Each added diagnostic is also emitted through :mod:`logging` at the
    matching level, so a console handler shows them as they happen.
    """

    entries: list[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        self.entries.append(diagnostic)
        where = f" [{diagnostic.element_id}]" if diagnostic.element_id else ""
        logger.log(
            _LEVELS[diagnostic.severity],
            "%s%s: %s",
            diagnostic.code,
            where,
            diagnostic.message,
        )

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    def error(self, code: str, message: str, element_id: str | None = None) -> None:
        self.add(Diagnostic.error(code, message, element_id))

    def warning(self, code: str, message: str, element_id: str | None = None) -> None:
        self.add(Diagnostic.warning(code, message, element_id))

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.entries)

    def codes(self) -> list[str]:
        return [d.code for d in self.entries]

    def to_list(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self.entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

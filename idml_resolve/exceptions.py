"""Exception hierarchy for idml-resolve.

Every error raised by the package derives from :class:`IdmlResolveError`, so a
caller resolving many elements can isolate one element's failure without
catching unrelated runtime faults.
"""

from __future__ import annotations


class IdmlResolveError(Exception):
    """Base class for all idml-resolve errors."""


class StructuralError(IdmlResolveError):
    """The document structure makes an element unplaceable.

    Raised when no page exists for a placement request or a spread holds no
    page at all. Fatal for the affected element only.
    """

    def __init__(self, message: str, element_id: str | None = None) -> None:
        super().__init__(message)
        self.element_id = element_id


class DataError(IdmlResolveError):
    """A required attribute is absent or a numeric attribute is malformed."""

    def __init__(
        self,
        message: str,
        element_id: str | None = None,
        attribute: str | None = None,
    ) -> None:
        super().__init__(message)
        self.element_id = element_id
        self.attribute = attribute


class IdmlParseError(IdmlResolveError):
    """The package is not a readable ZIP or one of its XML parts is malformed."""


class ConfigError(IdmlResolveError):
    """Configuration file or value is invalid."""

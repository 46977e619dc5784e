"""idml-resolve: geometry and style resolution for IDML documents.

This library reconstructs, per visual element of an InDesign Markup
Language (IDML) package:
- Page-relative placement through nested ItemTransforms
- Bézier path descriptions with handle-inclusive bounding boxes
- Solid and gradient fills from the document swatch table
- Story text split across threaded text frames, with styled runs

Example:
    >>> from idml_resolve import IdmlResolver
    >>> result = IdmlResolver().resolve_file("input.idml")
    >>> result.success
    True
"""

from idml_resolve.api import (
    ConversionResult,
    DocumentResources,
    IdmlResolver,
    ResolvedElement,
    ResolvedPage,
)
from idml_resolve.config import Config
from idml_resolve.diagnostics import Diagnostic, DiagnosticLog, Resolved, Severity
from idml_resolve.exceptions import (
    ConfigError,
    DataError,
    IdmlParseError,
    IdmlResolveError,
    StructuralError,
)
from idml_resolve.idml.package import IdmlPackage

__version__ = "0.1.0"

__all__ = [
    # Main API
    "IdmlResolver",
    "ConversionResult",
    "DocumentResources",
    "ResolvedElement",
    "ResolvedPage",
    "IdmlPackage",
    "Config",
    # Diagnostics
    "Diagnostic",
    "DiagnosticLog",
    "Resolved",
    "Severity",
    # Exceptions
    "IdmlResolveError",
    "StructuralError",
    "DataError",
    "IdmlParseError",
    "ConfigError",
    # Metadata
    "__version__",
]

"""IDML package access for idml-resolve.

This subpackage provides:
- Safe ZIP/XML loading with defusedxml
- Spread, story and resource lookups by archive path
- Namespace-agnostic element helpers
"""

from idml_resolve.idml.package import BleedMargins, IdmlPackage, parse_xml
from idml_resolve.idml.xml import child_path, children, first_child, first_descendant, iter_local, local_name

__all__ = [
    "BleedMargins",
    "IdmlPackage",
    "parse_xml",
    "child_path",
    "children",
    "first_child",
    "first_descendant",
    "iter_local",
    "local_name",
]

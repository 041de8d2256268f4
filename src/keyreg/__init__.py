"""keyreg: named-item registries with selection overlays."""

try:
    from ._version import __version__
except ImportError:  # pragma: no cover - package not built with setuptools_scm yet
    __version__ = "0.0.0"

from keyreg.errors import CatalogError, NoActiveItemError, NotFoundError, RegistryError
from keyreg.registry import KeyedRegistry, PrefixMatch
from keyreg.selection import MultiSelection, SingleSelection
from keyreg.typed import TypedRegistry

__all__ = [
    "CatalogError",
    "KeyedRegistry",
    "MultiSelection",
    "NoActiveItemError",
    "NotFoundError",
    "PrefixMatch",
    "RegistryError",
    "SingleSelection",
    "TypedRegistry",
    "__version__",
]

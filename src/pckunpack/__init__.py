"""pckunpack: read-only decoder and extractor for PCK resource archives."""

from .api import ExtractOptions, ExtractResult, extract_pck, inspect_pck, verify_pck
from .format.errors import (
    ArchiveIOError,
    FormatError,
    IntegrityWarning,
    PckError,
    UnsupportedFlagsError,
    UnsupportedVersionError,
)

__version__ = "0.1.0"

__all__ = [
    "ExtractOptions",
    "ExtractResult",
    "extract_pck",
    "inspect_pck",
    "verify_pck",
    "PckError",
    "FormatError",
    "UnsupportedVersionError",
    "UnsupportedFlagsError",
    "ArchiveIOError",
    "IntegrityWarning",
]

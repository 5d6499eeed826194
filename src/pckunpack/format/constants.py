"""Format constants for PCK archives and compiled texture containers."""

from __future__ import annotations

from enum import IntEnum

# Archive header
MAGIC = b"GDPC"
FORMAT_VERSION = 2
RESERVED_WORDS = 16

# Archive-level flags
PACK_DIR_ENCRYPTED = 1 << 0
PACK_REL_FILEBASE = 1 << 1
KNOWN_ARCHIVE_FLAGS = PACK_DIR_ENCRYPTED | PACK_REL_FILEBASE

# Entry-level flags
PACK_FILE_ENCRYPTED = 1 << 0
KNOWN_ENTRY_FLAGS = PACK_FILE_ENCRYPTED

PATH_ALIGNMENT = 4
DIGEST_SIZE = 16

# Extraction layout
SCHEME_PREFIX = "res://"
OUTPUT_ROOT = "export"

# Compiled texture container
CTEX_EXTENSION = ".ctex"
CTEX_SIGNATURE = b"GST2"
CTEX_VERSION = 1
CTEX_FORMAT_OFFSET = 36
CTEX_PREFIX_SIZE = 40
CTEX_MIPMAP_BASE = 0x34


class DataFormat(IntEnum):
    IMAGE = 0
    PNG = 1
    WEBP = 2
    BASIS_UNIVERSAL = 3


ARCHIVE_FLAG_NAMES = {
    PACK_DIR_ENCRYPTED: "PACK_DIR_ENCRYPTED",
    PACK_REL_FILEBASE: "PACK_REL_FILEBASE",
}

ENTRY_FLAG_NAMES = {
    PACK_FILE_ENCRYPTED: "PACK_FILE_ENCRYPTED",
}

__all__ = [
    "MAGIC",
    "FORMAT_VERSION",
    "RESERVED_WORDS",
    "PACK_DIR_ENCRYPTED",
    "PACK_REL_FILEBASE",
    "KNOWN_ARCHIVE_FLAGS",
    "PACK_FILE_ENCRYPTED",
    "KNOWN_ENTRY_FLAGS",
    "PATH_ALIGNMENT",
    "DIGEST_SIZE",
    "SCHEME_PREFIX",
    "OUTPUT_ROOT",
    "CTEX_EXTENSION",
    "CTEX_SIGNATURE",
    "CTEX_VERSION",
    "CTEX_FORMAT_OFFSET",
    "CTEX_PREFIX_SIZE",
    "CTEX_MIPMAP_BASE",
    "DataFormat",
    "ARCHIVE_FLAG_NAMES",
    "ENTRY_FLAG_NAMES",
]

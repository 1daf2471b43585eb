"""Archive handling for ergoshell inputs.

Key pieces:
    Archive / ArchiveEntry - in-memory path -> lazy byte stream collection
    zip_from_dir           - directory tree -> Archive
    load_zip               - zip bundle on disk -> Archive
    unpack                 - Archive -> UnpackedBundle (config text + injections)
"""

from .bundle import BUNDLE_SUFFIXES, is_bundle_path, load_zip, unpack
from .directory import list_files_in_dir, zip_from_dir
from .models import Archive, ArchiveEntry

__all__ = [
    "Archive",
    "ArchiveEntry",
    "BUNDLE_SUFFIXES",
    "is_bundle_path",
    "list_files_in_dir",
    "load_zip",
    "unpack",
    "zip_from_dir",
]

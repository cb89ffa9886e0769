"""Content-addressed storage for decrypted secrets."""

from agelock.core.store.base import (
    ContentStore,
    InvalidStoreName,
    StoreError,
    StorePath,
    validate_store_name,
)
from agelock.core.store.local import LocalContentStore
from agelock.core.store.paths import make_fixed_output_path
from agelock.core.store.substituters import DirectorySubstituter, Substituter

__all__ = [
    "ContentStore",
    "DirectorySubstituter",
    "InvalidStoreName",
    "LocalContentStore",
    "StoreError",
    "StorePath",
    "Substituter",
    "make_fixed_output_path",
    "validate_store_name",
]

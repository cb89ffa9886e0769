"""Decryption backends."""

from agelock.core.decrypt.age import AgeDecryptor
from agelock.core.decrypt.base import Decryptor, DecryptorError

__all__ = [
    "AgeDecryptor",
    "Decryptor",
    "DecryptorError",
]

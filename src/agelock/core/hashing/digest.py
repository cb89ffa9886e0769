"""Algorithm-tagged digests and their textual encodings.

Digests are printed in SRI form (``sha256-<base64>``), which is what users
paste back into their configuration.  Parsing also accepts the
``algo:<digest>`` form and bare digests, where the digest part may be
hexadecimal, Nix base32, or base64.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass
from enum import Enum

NIX_BASE32_ALPHABET = "0123456789abcdfghijklmnpqrsvwxyz"


class HashAlgorithm(str, Enum):
    """Hash algorithms recognised in digest strings."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def size(self) -> int:
        """Digest size in bytes."""
        return hashlib.new(self.value).digest_size


class DigestParseError(ValueError):
    """Raised when a digest string cannot be decoded."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"invalid hash '{text}': {reason}")


def nix_base32_encode(data: bytes) -> str:
    """Encode *data* in the base32 variant used for store path names."""
    length = nix_base32_length(len(data))
    chars = []
    for n in range(length - 1, -1, -1):
        b = n * 5
        i, j = divmod(b, 8)
        c = data[i] >> j
        if i + 1 < len(data):
            c |= data[i + 1] << (8 - j)
        chars.append(NIX_BASE32_ALPHABET[c & 0x1F])
    return "".join(chars)


def nix_base32_decode(text: str, size: int) -> bytes:
    """Decode a Nix base32 string of a *size*-byte digest."""
    if len(text) != nix_base32_length(size):
        raise DigestParseError(text, "wrong length for base32 digest")
    out = bytearray(size)
    for n, ch in enumerate(reversed(text)):
        digit = NIX_BASE32_ALPHABET.find(ch)
        if digit < 0:
            raise DigestParseError(text, f"invalid base32 character '{ch}'")
        b = n * 5
        i, j = divmod(b, 8)
        out[i] |= (digit << j) & 0xFF
        carry = digit >> (8 - j)
        if i + 1 < size:
            out[i + 1] |= carry
        elif carry:
            raise DigestParseError(text, "base32 digest overflows")
    return bytes(out)


def nix_base32_length(size: int) -> int:
    return (size * 8 - 1) // 5 + 1


@dataclass(frozen=True)
class Digest:
    """A hash value tagged with the algorithm that produced it.

    Args:
        algorithm: The hash algorithm.
        value: Raw digest bytes.
    """

    algorithm: HashAlgorithm
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != self.algorithm.size:
            raise ValueError(
                f"{self.algorithm.value} digest must be {self.algorithm.size} bytes, "
                f"got {len(self.value)}"
            )

    @classmethod
    def of(cls, content: bytes, algorithm: HashAlgorithm = HashAlgorithm.SHA256) -> Digest:
        """Hash *content* with *algorithm*."""
        return cls(algorithm, hashlib.new(algorithm.value, content).digest())

    @classmethod
    def parse(cls, text: str, default: HashAlgorithm | None = HashAlgorithm.SHA256) -> Digest:
        """Parse a digest from SRI, ``algo:digest`` or bare form.

        Args:
            text: The digest string.
            default: Algorithm assumed for bare digests. ``None`` makes the
                algorithm prefix mandatory.

        Raises:
            DigestParseError: If the string is not a valid digest.
        """
        text = text.strip()
        if ":" in text:
            prefix, _, encoded = text.partition(":")
            return cls._decode(text, _algorithm(text, prefix), encoded, sri=False)

        prefix, sep, encoded = text.partition("-")
        if sep and prefix in _ALGORITHM_NAMES:
            return cls._decode(text, _algorithm(text, prefix), encoded, sri=True)

        if default is None:
            raise DigestParseError(text, "hash does not include a type")
        return cls._decode(text, default, text, sri=False)

    @classmethod
    def parse_optional(cls, text: str | None) -> Digest | None:
        """Parse *text*, treating ``None`` and the empty string as absent."""
        if text is None or not text.strip():
            return None
        return cls.parse(text)

    @classmethod
    def _decode(cls, text: str, algorithm: HashAlgorithm, encoded: str, *, sri: bool) -> Digest:
        size = algorithm.size
        if sri:
            return cls(algorithm, _b64decode(text, encoded, size))
        if len(encoded) == size * 2:
            try:
                return cls(algorithm, bytes.fromhex(encoded))
            except ValueError:
                raise DigestParseError(text, "invalid hexadecimal digest") from None
        if len(encoded) == nix_base32_length(size):
            return cls(algorithm, nix_base32_decode(encoded, size))
        if len(encoded) == _b64_length(size):
            return cls(algorithm, _b64decode(text, encoded, size))
        raise DigestParseError(text, f"wrong length for {algorithm.value} digest")

    def to_sri(self) -> str:
        """Render as ``<algo>-<base64>``."""
        return f"{self.algorithm.value}-{base64.b64encode(self.value).decode('ascii')}"

    def to_hex(self, *, include_algorithm: bool = False) -> str:
        hex_value = self.value.hex()
        if include_algorithm:
            return f"{self.algorithm.value}:{hex_value}"
        return hex_value

    def to_base32(self) -> str:
        return nix_base32_encode(self.value)

    def __str__(self) -> str:
        return self.to_sri()


_ALGORITHM_NAMES = {algo.value: algo for algo in HashAlgorithm}


def _algorithm(text: str, name: str) -> HashAlgorithm:
    try:
        return _ALGORITHM_NAMES[name]
    except KeyError:
        raise DigestParseError(text, f"unknown hash algorithm '{name}'") from None


def _b64_length(size: int) -> int:
    return ((4 * size // 3) + 3) & ~3


def _b64decode(text: str, encoded: str, size: int) -> bytes:
    try:
        value = base64.b64decode(encoded, validate=True)
    except binascii.Error:
        raise DigestParseError(text, "invalid base64 digest") from None
    if len(value) != size:
        raise DigestParseError(text, "wrong length for base64 digest")
    return value

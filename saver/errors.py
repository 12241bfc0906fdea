"""
Error Types
===========

Typed outcomes raised by the SAVER package.

Hierarchy:
----------
- SaverError: base class for everything raised on purpose by this package
- EncodingError: decomposition or circuit encoding failed
  - RangeError: message or digit outside the configured (b, n) bounds
  - SerializationError: a serialized transcript could not be decoded
- GeneratorMismatchError: malformed public parameters (fatal for setup)
- DecryptionError: a chunk did not decrypt to a digit in [0, b)

A rejected proof is NOT an error: verification functions return False.

Messages never carry plaintext digits or randomness.
"""


class SaverError(Exception):
    """Base class for SAVER errors."""


class EncodingError(SaverError):
    """The message or witness could not be encoded for encryption/proving."""


class RangeError(EncodingError):
    """A message or digit does not fit the configured radix and digit count."""


class SerializationError(EncodingError):
    """A serialized ciphertext, commitment or proof is malformed."""


class GeneratorMismatchError(SaverError):
    """Public generators are malformed or inconsistent with (b, n)."""


class DecryptionError(SaverError):
    """A ciphertext chunk is outside the digit range (wrong key or corrupted)."""

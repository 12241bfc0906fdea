"""
SAVER configuration.

Defaults are read from the environment:

- SAVER_CURVE: pairing curve name (default MNT224)
- SAVER_CHUNK_BIT_SIZE: bits per digit, the radix is 2**bits (default 8)
- SAVER_DIGIT_COUNT: number of digits n; when unset, enough digits to cover
  any field element are used
"""

import os

from .decompose import chunks_count

DEFAULT_CURVE = os.getenv('SAVER_CURVE', 'MNT224')
DEFAULT_CHUNK_BIT_SIZE = int(os.getenv('SAVER_CHUNK_BIT_SIZE', 8))
DEFAULT_DIGIT_COUNT = os.getenv('SAVER_DIGIT_COUNT')


class Config:
    """Configuration for a (b, n) SAVER instance."""

    def __init__(self):
        self.curve = DEFAULT_CURVE
        self.chunk_bit_size = DEFAULT_CHUNK_BIT_SIZE
        self.digit_count = int(DEFAULT_DIGIT_COUNT) if DEFAULT_DIGIT_COUNT else None

    @property
    def radix(self) -> int:
        return 1 << self.chunk_bit_size

    def digits_for(self, order: int) -> int:
        """Digit count n for a group of the given order."""
        if self.digit_count is not None:
            return self.digit_count
        return chunks_count(self.chunk_bit_size, order)


# global configuration instance
config = Config()

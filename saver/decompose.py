"""
Digit Decomposition
===================

Splits a message m into n big-endian digits in radix b:

    m = ∑_{i=1}^{n} m_i · b^{n-i},    0 <= m_i < b

The digit count is fixed by configuration, not by the magnitude of m, so
m = 0 decomposes to n zeros. Decomposition is unique for a given (b, n) and
out-of-range inputs are rejected, never clamped.
"""

from typing import List, Sequence, Tuple

from charm.toolbox.pairinggroup import PairingGroup

from .errors import RangeError


def _check_params(b: int, n: int):
    if b < 2:
        raise ValueError(f"Radix b={b} must be at least 2")
    if n < 1:
        raise ValueError(f"Digit count n={n} must be at least 1")


def decompose(m: int, b: int, n: int) -> Tuple[int, ...]:
    """
    Decompose m into n big-endian digits in radix b.

    Parameters
    ----------
    m : int
        The message, 0 <= m < b^n
    b : int
        The digit radix (power of two recommended)
    n : int
        The digit count

    Returns
    -------
    Tuple[int, ...]
        The digits (m_1, ..., m_n), most significant first

    Raises
    ------
    RangeError
        If m is negative or m >= b^n
    ValueError
        If b < 2 or n < 1

    Examples
    --------
    >>> decompose(325, 16, 3)
    (1, 4, 5)
    >>> decompose(0, 16, 3)
    (0, 0, 0)
    """
    _check_params(b, n)
    m = int(m)
    if m < 0:
        raise RangeError("Message must be non-negative")
    if m >= b ** n:
        raise RangeError(f"Message does not fit in {n} digits of radix {b}")

    digits = [0] * n
    for i in range(n - 1, -1, -1):
        m, digits[i] = divmod(m, b)
    return tuple(digits)


def reconstruct(digits: Sequence[int], b: int) -> int:
    """
    Recompose big-endian digits: m = ∑ m_i · b^{n-i}.

    Raises RangeError if any digit is outside [0, b).
    """
    m = 0
    for i, d in enumerate(digits):
        d = int(d)
        if d < 0 or d >= b:
            raise RangeError(f"Digit at position {i + 1} is outside [0, {b})")
        m = m * b + d
    return m


def radix_powers(b: int, n: int) -> List[int]:
    """Return the digit weights [b^{n-1}, b^{n-2}, ..., b, 1]."""
    _check_params(b, n)
    return [b ** (n - i) for i in range(1, n + 1)]


def chunks_count(chunk_bit_size: int, order: int) -> int:
    """
    Number of digits of chunk_bit_size bits needed to hold any element of
    a field with the given order.

    Examples
    --------
    >>> chunks_count(8, 2 ** 255 - 19)
    32
    """
    if chunk_bit_size < 1:
        raise ValueError(f"chunk_bit_size={chunk_bit_size} must be positive")
    bits = int(order).bit_length()
    return (bits + chunk_bit_size - 1) // chunk_bit_size


def decompose_field_element(m, chunk_bit_size: int, group: PairingGroup) -> Tuple[int, ...]:
    """
    Decompose a field element (ZR or int) into radix 2^chunk_bit_size digits,
    using as many digits as the scalar field needs.
    """
    order = int(group.order())
    m = int(m)
    if m < 0 or m >= order:
        raise RangeError("Message is not an element of the scalar field")
    return decompose(m, 1 << chunk_bit_size, chunks_count(chunk_bit_size, order))

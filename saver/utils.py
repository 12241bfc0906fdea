"""
Utility Functions
=================

This module provides utility functions for group operations, multi-exponentiation,
scalar sampling and element encoding.

Key Operations:
- Multi-exponentiation: Compute ∏ g_i^{e_i}
- GT operations: Division (multiplication by inverse) in GT
- Scalar sampling with an injectable randomness source
- Canonical byte encoding of group elements

According to charm-crypto documentation:
- Group operations use * for multiplication, ** for exponentiation
- Inverse is computed as elem ** -1
- Serialization uses objectToBytes() and bytesToObject()
"""

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, GT
from charm.core.engine.util import objectToBytes
from charm.core.math.pairing import pc_element
from typing import Sequence, Union


def zr(value, group: PairingGroup) -> ZR:
    """Lift a Python int (or ZR) into the scalar field."""
    if isinstance(value, int):
        return group.init(ZR, value % int(group.order()))
    return value


def random_scalar(group: PairingGroup, rng=None, nonzero: bool = False) -> ZR:
    """
    Sample a scalar in Z_p.

    Parameters
    ----------
    group : PairingGroup
        The pairing group
    rng : object, optional
        Any object with a ``randrange(start, stop)`` method, for example
        ``secrets.SystemRandom()``. If None, the group's own generator is used.
    nonzero : bool, optional
        Reject zero.

    Notes
    -----
    Every call draws fresh randomness; nothing is cached between calls.
    A shared rng must be safe for concurrent use (SystemRandom is).
    """
    zero = group.init(ZR, 0)
    if rng is None:
        s = group.random(ZR)
        while nonzero and s == zero:
            s = group.random(ZR)
        return s
    p = int(group.order())
    return group.init(ZR, rng.randrange(1 if nonzero else 0, p))


def multiexp(bases: Sequence, exponents: Sequence[ZR]):
    """
    Compute ∏ bases[i]^{exponents[i]} in whichever group the bases live in.

    Notes
    -----
    - bases must be non-empty; the product starts from the first term so no
      identity element is needed
    - This does NOT use any special multi-exponentiation algorithm
    """
    if len(bases) == 0:
        raise ValueError("multiexp needs at least one base")
    if len(bases) != len(exponents):
        raise ValueError(f"bases and exponents must have same length: {len(bases)} != {len(exponents)}")

    result = bases[0] ** exponents[0]
    for base, exp in zip(bases[1:], exponents[1:]):
        result *= base ** exp
    return result


def div(numerator: Union[G1, GT], denominator: Union[G1, GT], group: PairingGroup) -> Union[G1, GT]:
    """Compute numerator / denominator = numerator * denominator^{-1} in G1 or GT."""
    return numerator * (denominator ** -1)


def identity_like(elem, group: PairingGroup):
    """The identity of the group `elem` belongs to."""
    return elem ** group.init(ZR, 0)


def encode_element(elem: Union[G1, GT, ZR], group: PairingGroup) -> bytes:
    """
    Serialize a group element to bytes.

    The encoding is deterministic, so it doubles as a dictionary key
    (decryption table) and as hash input (Fiat-Shamir).
    """
    return objectToBytes(elem, group)


def element_type(obj, group: PairingGroup):
    """
    The charm group tag (ZR, G1, G2 or GT) of `obj`, or None if `obj` is not
    a pairing element.

    charm serializes elements as b"<tag>:<base64>", so the tag is read from
    the serialized prefix without doing any group arithmetic.
    """
    if not isinstance(obj, pc_element):
        return None
    data = group.serialize(obj)
    if isinstance(data, str):
        data = data.encode('utf-8')
    tag, _, _ = data.partition(b':')
    try:
        return int(tag)
    except ValueError:
        return None


def same_group(obj, reference, group: PairingGroup) -> bool:
    """True iff `obj` is a pairing element of the same group as `reference`."""
    tag = element_type(obj, group)
    return tag is not None and tag == element_type(reference, group)


def all_in_group(objs, reference, group: PairingGroup) -> bool:
    """True iff every item of the sequence `objs` is in the group of `reference`."""
    return all(same_group(obj, reference, group) for obj in objs)

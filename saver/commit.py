"""
Commitment Generation
=====================

This module implements the multi-base Pedersen commitments used by SAVER:
- phi: digit-wise commitment built during encryption
- J: whole-message commitment over the bases G_i = G^{b^{n-i}}

Both are instances of one generic commitment

    C := ∏_{i=1}^n bases_i^{m_i} · blinding_base^{r} ∈ G1

parameterized by the generator vector.
"""

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1
from typing import Sequence

from .decompose import decompose
from .errors import GeneratorMismatchError
from .utils import multiexp, zr


def commit(digits: Sequence[int], randomness: ZR, bases: Sequence[G1], blinding_base: G1,
           group: PairingGroup) -> G1:
    """
    Generic multi-base Pedersen commitment.

    Formula:
    --------
    C := ∏_{i=1}^n bases_i^{m_i} · blinding_base^{r}

    Parameters
    ----------
    digits : Sequence[int]
        The committed vector (m_1, ..., m_n)
    randomness : ZR
        The blinding r
    bases : Sequence[G1]
        One base per digit
    blinding_base : G1
        The base of the blinding
    group : PairingGroup
        The pairing group

    Returns
    -------
    G1
        The commitment C

    Raises
    ------
    GeneratorMismatchError
        If len(bases) != len(digits)
    """
    if len(bases) != len(digits):
        raise GeneratorMismatchError(f"{len(bases)} bases for {len(digits)} digits")

    exponents = [zr(int(d), group) for d in digits] + [randomness]
    return multiexp(list(bases) + [blinding_base], exponents)


def commit_phi(digits: Sequence[int], r: ZR, generators: dict) -> dict:
    """
    Digit commitment phi = ∏ Y_i^{m_i} · P_2^{r}.

    During encryption r is the encryption randomness, which is what ties phi
    to the ciphertext.

    Returns
    -------
    dict
        {'value': phi, 'randomness': r}
    """
    value = commit(digits, r, generators['Y'], generators['P_2'], generators['group'])
    return {'value': value, 'randomness': r}


def commit_message(digits: Sequence[int], r_prime: ZR, generators: dict) -> dict:
    """
    Whole-message commitment J = ∏ G_i^{m_i} · H^{r'}.

    Since G_i = G^{b^{n-i}}, J equals G^{m} · H^{r'} where m is the message
    the digits decompose.

    Returns
    -------
    dict
        {'value': J, 'randomness': r'}
    """
    value = commit(digits, r_prime, generators['G_list'], generators['H'], generators['group'])
    return {'value': value, 'randomness': r_prime}


def chunked_commitment(m: int, blinding: ZR, generators: dict) -> G1:
    """
    Decompose m and commit to its digits over (G_list, H) in one step.

    The result equals G^{m} · H^{blinding}.

    Examples
    --------
    >>> J = chunked_commitment(325, r_prime, generators)
    >>> assert J == (generators['G'] ** group.init(ZR, 325)) * (generators['H'] ** r_prime)
    """
    digits = decompose(m, generators['b'], generators['n'])
    return commit(digits, blinding, generators['G_list'], generators['H'], generators['group'])

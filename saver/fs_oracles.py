"""
Fiat-Shamir Random Oracles
===========================

This module implements the random oracles (hash functions) used in the
Fiat-Shamir transformation to make the sigma protocols non-interactive.

Random Oracles:
---------------
- H_enc: Challenge for the encryption proof (ciphertext + phi + digit ranges)
- H_eq: Challenge for the equality-of-opening proof between phi and J
- H_dec: Challenge for the proof of correct decryption

Domain Separation:
------------------
Each hash function uses a different prefix to ensure domain separation:
- H_enc uses prefix b"SAVER-ENC"
- H_eq uses prefix b"SAVER-EQ"
- H_dec uses prefix b"SAVER-DEC"

According to charm-crypto documentation:
- Use group.hash(data, ZR) to hash arbitrary data to a scalar in Z_p
- Data should be serialized to bytes before hashing
"""

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1
from typing import Sequence

from .utils import encode_element


def _serialize_for_hash(group: PairingGroup, *args) -> bytes:
    """
    Serialize group elements, integers, strings and nested sequences for hashing.

    Every item is length-prefixed so that concatenations cannot collide.
    """
    result = b""
    for arg in args:
        if isinstance(arg, bytes):
            chunk = arg
        elif isinstance(arg, int):
            chunk = arg.to_bytes((arg.bit_length() + 7) // 8 or 1, 'big')
        elif isinstance(arg, str):
            chunk = arg.encode('utf-8')
        elif isinstance(arg, (list, tuple)):
            chunk = _serialize_for_hash(group, *arg)
        else:
            chunk = encode_element(arg, group)
        result += len(chunk).to_bytes(4, 'big') + chunk
    return result


def _relation_transcript(relations: Sequence[dict]) -> list:
    """Flatten relations (target, bases, witness indices) into hashable items."""
    items = []
    for rel in relations:
        items.append(rel['target'])
        items.append([base for base, _ in rel['terms']])
        items.append([idx for _, idx in rel['terms']])
    return items


def H_enc(label: str, b: int, n: int, relations: Sequence[dict], V: Sequence[G1],
          commitments: Sequence, group: PairingGroup) -> ZR:
    """
    Random oracle H_enc: challenge for the encryption proof.

    The hash is computed over
    (prefix || label || b || n || relations || V_1..V_n || t_1..t_k)
    where the relations carry the ciphertext, phi and the public bases.
    """
    prefix = b"SAVER-ENC"
    data = _serialize_for_hash(group, prefix, label, b, n,
                               _relation_transcript(relations), list(V), list(commitments))
    return group.hash(data, ZR)


def H_eq(generators: dict, phi: G1, J: G1, t_phi: G1, t_J: G1, group: PairingGroup) -> ZR:
    """
    Random oracle H_eq: challenge for the equality-of-opening proof.

    The generator vectors are part of the hash: a proof is only valid for the
    bases it was produced with.
    """
    prefix = b"SAVER-EQ"
    data = _serialize_for_hash(group, prefix, generators['b'], generators['n'],
                               list(generators['Y']), generators['P_2'],
                               list(generators['G_list']), generators['H'],
                               phi, J, t_phi, t_J)
    return group.hash(data, ZR)


def H_dec(relations: Sequence[dict], message: int, commitments: Sequence, group: PairingGroup) -> ZR:
    """Random oracle H_dec: challenge for the proof of correct decryption."""
    prefix = b"SAVER-DEC"
    data = _serialize_for_hash(group, prefix, message,
                               _relation_transcript(relations), list(commitments))
    return group.hash(data, ZR)

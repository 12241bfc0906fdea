"""
SAVER Verifiable Encryption
===========================

Encrypts a message while producing a commitment to it and a proof that the
ciphertext encrypts exactly the committed value, checkable without learning
the plaintext.

This package implements the scheme using charm-crypto with Type-3
asymmetric pairing curves.

Modules:
--------
- groups: Group initialization and setup
- config: Environment-driven configuration
- decompose: Big-endian radix-b digit decomposition
- keygen: Generators, commitment keys, encryption keys and setup
- commit: Multi-base Pedersen commitments (phi and J)
- circuit: Constraint description of the encryption relation
- backend: ProofBackend capability and the pairing-based sigma backend
- encryption: encrypt / decrypt / verify and verifiable decryption
- equality: Proof that phi and J open to the same digits
- sigma: Schnorr proofs of linear relations between discrete logs
- fs_oracles: Fiat-Shamir random oracles with domain separation
- serialization: JSON/base64 encodings of transcripts
- utils: Multi-exponentiation, scalar sampling, element encoding

Usage:
------
    from saver import setup_group, setup, encrypt, decrypt, verify

    params = setup_group('MNT224')
    pk, vk, ek, dk, generators = setup(b=16, n=3, params=params)

    ciphertext, commitment, proof = encrypt(325, ek, pk)
    assert verify(ciphertext, commitment, proof, vk)
    assert decrypt(ciphertext, dk) == 325
"""

import logging

__version__ = "0.1.0"

from .groups import setup as setup_group
from .keygen import setup, setup_from_config
from .decompose import decompose, reconstruct
from .commit import commit, commit_phi, commit_message
from .encryption import encrypt, decrypt, verify, decrypt_with_proof, verify_decryption
from .equality import prove_equal_opening, verify_equal_opening
from .errors import (
    SaverError, EncodingError, RangeError, SerializationError,
    GeneratorMismatchError, DecryptionError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'setup_group', 'setup', 'setup_from_config',
    'decompose', 'reconstruct',
    'commit', 'commit_phi', 'commit_message',
    'encrypt', 'decrypt', 'verify', 'decrypt_with_proof', 'verify_decryption',
    'prove_equal_opening', 'verify_equal_opening',
    'SaverError', 'EncodingError', 'RangeError', 'SerializationError',
    'GeneratorMismatchError', 'DecryptionError',
]

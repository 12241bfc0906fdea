"""
Encryption and Decryption
=========================

Encryption (randomness r, digits m_1..m_n of m):
------------------------------------------------
    c_0 = g^{r}
    c_i = X_i^{r} · g^{m_i}                  i ∈ [n]
    phi = ∏_{i=1}^n Y_i^{m_i} · P_2^{r}

together with a backend proof that the ciphertext, phi and the digit ranges
are consistent (saver.circuit).

Decryption:
-----------
    g^{m_i} = c_i / c_0^{s_i}

is looked up in the table of g^k for k ∈ [0, b) and the message is
recomposed as ∑ m_i · b^{n-i}. A chunk outside the table means a wrong key
or a corrupted ciphertext and raises DecryptionError.

Verifiable decryption:
----------------------
The decryptor can prove that it used the key matching ek: per chunk,
log_g(X_i) = log_{c_0}(c_i / g^{m_i}) (Chaum-Pedersen).
"""

import logging
from typing import Tuple

from .backend import ProofBackend, SigmaProofBackend
from .circuit import build_circuit, build_witness
from .commit import commit_phi
from .decompose import decompose, reconstruct
from .errors import DecryptionError, EncodingError, RangeError
from .fs_oracles import H_dec
from .sigma import LinearRelationProtocol, relation, verify_relations, well_formed
from .utils import all_in_group, div, encode_element, random_scalar, same_group, zr

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = SigmaProofBackend()


def _check_ciphertext(ciphertext: dict, n: int, g, group):
    """
    Check that a ciphertext has the fields c_0 and c, n chunks, and only
    elements of the group of g (G1).

    Raises
    ------
    EncodingError
        Describing the first problem found
    """
    if not isinstance(ciphertext, dict) or 'c_0' not in ciphertext or 'c' not in ciphertext:
        raise EncodingError("Ciphertext must have the fields c_0 and c")
    chunks = ciphertext['c']
    if not isinstance(chunks, (list, tuple)):
        raise EncodingError("Ciphertext chunks must be a sequence")
    if len(chunks) != n:
        raise EncodingError(f"Ciphertext has {len(chunks)} chunks, expected {n}")
    if not same_group(ciphertext['c_0'], g, group) or not all_in_group(chunks, g, group):
        raise EncodingError("Ciphertext elements must be in G1")


def encrypt(message: int, ek: dict, pk: dict, backend: ProofBackend = None, rng=None) -> Tuple[dict, dict, dict]:
    """
    Encrypt a message and prove the ciphertext consistent with phi.

    Parameters
    ----------
    message : int
        The message, 0 <= message < min(p, b^n)
    ek : dict
        The encryption key from saver.keygen.setup()
    pk : dict
        The proving key from saver.keygen.setup()
    backend : ProofBackend, optional
        Defaults to SigmaProofBackend
    rng : object, optional
        Randomness source with randrange(); group RNG if None

    Returns
    -------
    ciphertext : dict
        {'c_0': G1, 'c': (c_1, ..., c_n)}
    commitment : dict
        {'value': phi, 'randomness': r}
    proof : dict
        The backend proof

    Raises
    ------
    RangeError
        If the message is not a field element or does not fit (b, n).
        No ciphertext is produced.

    Examples
    --------
    >>> pk, vk, ek, dk, gens = setup(16, 3, setup_group('MNT224'))
    >>> ct, phi, proof = encrypt(325, ek, pk)
    >>> decrypt(ct, dk)
    325
    """
    if backend is None:
        backend = DEFAULT_BACKEND

    group = ek['group']
    g = ek['g']
    if int(message) >= int(group.order()):
        raise RangeError("Message is not an element of the scalar field")
    digits = decompose(message, ek['b'], ek['n'])

    r = random_scalar(group, rng)
    ciphertext = {
        'c_0': g ** r,
        'c': tuple(X_i ** r * g ** zr(d, group) for X_i, d in zip(ek['X'], digits)),
    }
    commitment = commit_phi(digits, r, ek['generators'])

    circuit = build_circuit(ciphertext, commitment['value'], ek)
    witness = build_witness(digits, r, group)
    proof = backend.prove(pk, circuit, witness, rng=rng)

    return ciphertext, commitment, proof


def verify(ciphertext: dict, commitment, proof: dict, vk: dict, backend: ProofBackend = None) -> bool:
    """
    Verify that a ciphertext is a correct encryption consistent with phi.

    Parameters
    ----------
    ciphertext : dict
        The ciphertext from encrypt()
    commitment : dict or G1
        The commitment from encrypt() (only its value is used) or phi itself
    proof : dict
        The proof from encrypt()
    vk : dict
        The verifying key from saver.keygen.setup()

    Returns
    -------
    bool
        True if the proof verifies, False if it is rejected

    Raises
    ------
    EncodingError
        If the ciphertext or the commitment is malformed: missing fields,
        the wrong number of chunks, or elements outside G1
    """
    if backend is None:
        backend = DEFAULT_BACKEND

    ek = vk['ek']
    _check_ciphertext(ciphertext, ek['n'], ek['g'], ek['group'])
    phi = commitment['value'] if isinstance(commitment, dict) else commitment
    if not same_group(phi, ek['g'], ek['group']):
        raise EncodingError("Commitment must be a G1 element")

    circuit = build_circuit(ciphertext, phi, ek)
    ok = backend.verify(vk, circuit, proof)
    if not ok:
        logger.info("Encryption proof rejected")
    return ok


def _decrypt_chunks(ciphertext: dict, dk: dict) -> Tuple[int, ...]:
    group = dk['group']
    try:
        _check_ciphertext(ciphertext, dk['n'], dk['g'], group)
    except EncodingError as e:
        raise DecryptionError(str(e)) from e

    c_0 = ciphertext['c_0']
    digits = []
    for i, (c_i, s_i) in enumerate(zip(ciphertext['c'], dk['s']), start=1):
        g_m = div(c_i, c_0 ** s_i, group)
        d = dk['table'].get(encode_element(g_m, group))
        if d is None:
            raise DecryptionError(f"Chunk {i} is not an encryption of a digit in [0, {dk['b']})")
        digits.append(d)
    return tuple(digits)


def decrypt(ciphertext: dict, dk: dict) -> int:
    """
    Decrypt a ciphertext.

    Raises
    ------
    DecryptionError
        If the ciphertext is malformed or a chunk does not decrypt to a digit
        in [0, b), which signals a wrong key or a corrupted ciphertext
    """
    return reconstruct(_decrypt_chunks(ciphertext, dk), dk['b'])


def _decryption_relations(ciphertext: dict, digits, ek: dict) -> tuple:
    """
    Per chunk i (witness s_i at index i-1):
        X_i = g^{s_i}
        c_i / g^{m_i} = c_0^{s_i}
    """
    group = ek['group']
    g = ek['g']
    rels = []
    for i, (X_i, c_i, d) in enumerate(zip(ek['X'], ciphertext['c'], digits)):
        rels.append(relation(X_i, [(g, i)]))
        rels.append(relation(div(c_i, g ** zr(d, group), group), [(ciphertext['c_0'], i)]))
    return tuple(rels)


def decrypt_with_proof(ciphertext: dict, dk: dict, ek: dict, rng=None) -> Tuple[int, dict]:
    """
    Decrypt and prove that decryption used the key matching ek.

    Returns
    -------
    message : int
        The plaintext
    proof : dict
        {'commitments', 'responses'}; check with verify_decryption()
    """
    digits = _decrypt_chunks(ciphertext, dk)
    message = reconstruct(digits, dk['b'])

    relations = _decryption_relations(ciphertext, digits, ek)
    protocol = LinearRelationProtocol.init(relations, list(dk['s']), dk['group'], rng)
    challenge = H_dec(relations, message, protocol.commitments, dk['group'])
    return message, protocol.gen_proof(challenge)


def verify_decryption(ciphertext: dict, message: int, proof: dict, ek: dict) -> bool:
    """
    Check a proof of correct decryption for a claimed message.

    Returns False if the claimed message does not fit (b, n), the ciphertext
    is malformed, or the proof is rejected.
    """
    group = ek['group']
    try:
        digits = decompose(message, ek['b'], ek['n'])
    except RangeError:
        logger.debug("Claimed plaintext does not fit the configured digits")
        return False
    try:
        _check_ciphertext(ciphertext, ek['n'], ek['g'], group)
    except EncodingError as e:
        logger.debug("Malformed ciphertext: %s", e)
        return False

    relations = _decryption_relations(ciphertext, digits, ek)
    try:
        if not well_formed(relations, proof, ek['n'], group):
            return False
        challenge = H_dec(relations, message, proof['commitments'], group)
        return verify_relations(relations, proof, challenge, ek['n'], group)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Malformed decryption proof rejected: %s", e)
        return False

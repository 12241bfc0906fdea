"""
Encryption Circuit
==================

Encodes the SAVER encryption relation as constraints for a proof backend.

Witness layout:
---------------
    w = [r, m_1, ..., m_n]

Constraints:
------------
- (a) Range:       m_i ∈ [0, b)                           for i ∈ [n]
- (b) Ciphertext:  c_0 = g^{r}
                   c_i = X_i^{r} · g^{m_i}                 for i ∈ [n]
- (c) Commitment:  phi = ∏_{i=1}^n Y_i^{m_i} · P_2^{r}

The linear constraints are relations between discrete logs (see saver.sigma);
the range constraints are listed by witness index and left to the backend to
enforce. Nothing here depends on which backend is used.
"""

import logging
from typing import List, Sequence

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1

from .errors import EncodingError
from .sigma import holds, relation
from .utils import zr

logger = logging.getLogger(__name__)

CIRCUIT_LABEL = 'saver-encryption-v1'
R_INDEX = 0


def digit_index(i: int) -> int:
    """Witness index of digit m_i (1-indexed i)."""
    return i


def build_circuit(ciphertext: dict, phi: G1, ek: dict) -> dict:
    """
    Build the public constraint description for one ciphertext.

    Parameters
    ----------
    ciphertext : dict
        {'c_0': G1, 'c': (c_1, ..., c_n)}
    phi : G1
        The digit commitment
    ek : dict
        The encryption key (carries the generator set)

    Returns
    -------
    dict
        - 'label': domain separation label
        - 'group', 'b', 'n'
        - 'num_witnesses': n + 1
        - 'linear': relations (b) and (c)
        - 'range': witness indices constrained to [0, b)

    Raises
    ------
    EncodingError
        If the ciphertext does not have n chunks
    """
    group = ek['group']
    n = ek['n']
    g = ek['g']
    X = ek['X']
    generators = ek['generators']

    chunks = ciphertext['c']
    if len(chunks) != n:
        raise EncodingError(f"Ciphertext has {len(chunks)} chunks, expected {n}")

    linear = [relation(ciphertext['c_0'], [(g, R_INDEX)])]
    for i in range(1, n + 1):
        linear.append(relation(chunks[i - 1], [(X[i - 1], R_INDEX), (g, digit_index(i))]))

    phi_terms = [(generators['Y'][i - 1], digit_index(i)) for i in range(1, n + 1)]
    phi_terms.append((generators['P_2'], R_INDEX))
    linear.append(relation(phi, phi_terms))

    return {
        'label': CIRCUIT_LABEL,
        'group': group,
        'b': ek['b'],
        'n': n,
        'num_witnesses': n + 1,
        'linear': tuple(linear),
        'range': tuple(digit_index(i) for i in range(1, n + 1)),
    }


def build_witness(digits: Sequence[int], r: ZR, group: PairingGroup) -> List[ZR]:
    """Witness assignment [r, m_1, ..., m_n]."""
    return [r] + [zr(int(d), group) for d in digits]


def is_satisfied(circuit: dict, witness: Sequence[ZR]) -> bool:
    """
    Evaluate every constraint of the circuit against a witness.

    Returns False (and logs which kind of constraint failed) instead of
    raising, so callers decide how to report it.
    """
    if len(witness) != circuit['num_witnesses']:
        logger.debug("Witness has %d values, circuit expects %d",
                     len(witness), circuit['num_witnesses'])
        return False

    b = circuit['b']
    for idx in circuit['range']:
        if int(witness[idx]) >= b:
            logger.debug("Range constraint on witness %d not satisfied", idx)
            return False

    if not holds(circuit['linear'], witness):
        logger.debug("Linear constraints not satisfied")
        return False
    return True

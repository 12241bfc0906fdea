"""
Equality of Commitment Openings
===============================

Proves that the digit commitment created during encryption

    phi = ∏_{i=1}^n Y_i^{m_i} · P_2^{r}

and a whole-message commitment

    J = ∏_{i=1}^n G_i^{m_i} · H^{r'} = G^{m} · H^{r'}

open to the same digit vector (m_1, ..., m_n), without revealing it.
Since b, n and G are public, the G_i are re-derived by the verifier.

Protocol (Fiat-Shamir):
-----------------------
- Committed:  fresh blindings (k_1..k_n, k_r, k_r'),
              t_phi = ∏ Y_i^{k_i} · P_2^{k_r},  t_J = ∏ G_i^{k_i} · H^{k_r'}
- Challenged: c = H_eq(generators, phi, J, t_phi, t_J)
- Responded:  z_i = k_i + c·m_i, z_r = k_r + c·r, z_r' = k_r' + c·r'
- Verified/Rejected: both relations checked with the shared z_i

Witness layout: [m_1, ..., m_n, r, r'].

Note: whether this construction is a sound and efficient way of obtaining a
commitment to the full message is an open question. The proof shows that
one digit vector opens both phi and J; it does not range-check the digits
inside J, which are bounded only through the encryption proof over phi.
"""

import logging

from charm.toolbox.pairinggroup import ZR, G1

from .fs_oracles import H_eq
from .keygen import validate_generators
from .sigma import LinearRelationProtocol, relation, verify_relations, well_formed
from .utils import same_group, zr

logger = logging.getLogger(__name__)


def _equality_relations(phi: G1, J: G1, generators: dict) -> tuple:
    n = generators['n']
    phi_terms = [(generators['Y'][i], i) for i in range(n)] + [(generators['P_2'], n)]
    J_terms = [(generators['G_list'][i], i) for i in range(n)] + [(generators['H'], n + 1)]
    return relation(phi, phi_terms), relation(J, J_terms)


class EqualOpeningProtocol:
    """
    Prover side of the equality-of-opening protocol.

    init() samples fresh blindings on every call; gen_proof() consumes them,
    so blindings can never be shared between two proofs.
    """

    def __init__(self, phi: G1, J: G1, generators: dict, protocol: LinearRelationProtocol):
        self.phi = phi
        self.J = J
        self.generators = generators
        self._protocol = protocol
        self.t_phi, self.t_J = protocol.commitments

    @classmethod
    def init(cls, phi: G1, J: G1, openings: dict, generators: dict, rng=None):
        """
        Commit to fresh blindings.

        Parameters
        ----------
        phi, J : G1
            The two commitments
        openings : dict
            - 'digits': (m_1, ..., m_n)
            - 'r': randomness of phi
            - 'r_prime': randomness of J
        generators : dict
            The generator set
        """
        group = generators['group']
        witness = [zr(int(d), group) for d in openings['digits']]
        witness += [openings['r'], openings['r_prime']]
        relations = _equality_relations(phi, J, generators)
        return cls(phi, J, generators, LinearRelationProtocol.init(relations, witness, group, rng))

    def challenge(self) -> ZR:
        return H_eq(self.generators, self.phi, self.J, self.t_phi, self.t_J, self.generators['group'])

    def gen_proof(self, challenge: ZR) -> dict:
        """
        Respond to the challenge.

        Returns
        -------
        dict
            {'t_phi', 't_J', 'responses'}

        Raises
        ------
        RuntimeError
            If this protocol run already produced a proof
        """
        proof = self._protocol.gen_proof(challenge)
        return {
            't_phi': self.t_phi,
            't_J': self.t_J,
            'responses': proof['responses'],
        }


def prove_equal_opening(phi: G1, J: G1, openings: dict, generators: dict, rng=None) -> dict:
    """
    Prove that phi and J commit to the same digits.

    Parameters
    ----------
    phi : G1
        Digit commitment ∏ Y_i^{m_i} · P_2^{r}
    J : G1
        Whole-message commitment ∏ G_i^{m_i} · H^{r'}
    openings : dict
        {'digits', 'r', 'r_prime'}
    generators : dict
        The generator set (validated first)
    rng : object, optional
        Randomness source with randrange(); group RNG if None

    Returns
    -------
    dict
        The equality proof {'t_phi', 't_J', 'responses'}

    Raises
    ------
    GeneratorMismatchError
        If the generator set is malformed

    Notes
    -----
    Openings that do not match the commitments still yield a proof object;
    it is rejected by verify_equal_opening().

    Examples
    --------
    >>> ct, phi, proof = encrypt(325, ek, pk)
    >>> digits = decompose(325, 16, 3)
    >>> J = commit_message(digits, r_prime, generators)
    >>> openings = {'digits': digits, 'r': phi['randomness'], 'r_prime': r_prime}
    >>> eq = prove_equal_opening(phi['value'], J['value'], openings, generators)
    >>> verify_equal_opening(phi['value'], J['value'], eq, generators)
    True
    """
    validate_generators(generators)
    protocol = EqualOpeningProtocol.init(phi, J, openings, generators, rng)
    return protocol.gen_proof(protocol.challenge())


def verify_equal_opening(phi: G1, J: G1, proof: dict, generators: dict) -> bool:
    """
    Verify an equality-of-opening proof.

    Returns
    -------
    bool
        True if phi and J are proven to open to the same digits

    Raises
    ------
    GeneratorMismatchError
        If the generator set is malformed (misconfiguration, not rejection)
    """
    validate_generators(generators)
    group = generators['group']
    n = generators['n']

    if not same_group(phi, generators['H'], group) or not same_group(J, generators['H'], group):
        logger.debug("Commitments must be G1 elements")
        return False

    relations = _equality_relations(phi, J, generators)
    try:
        transcript = {
            'commitments': (proof['t_phi'], proof['t_J']),
            'responses': proof['responses'],
        }
        if not well_formed(relations, transcript, n + 2, group):
            return False
        challenge = H_eq(generators, phi, J, proof['t_phi'], proof['t_J'], group)
        ok = verify_relations(relations, transcript, challenge, n + 2, group)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Malformed equality proof rejected: %s", e)
        return False
    if not ok:
        logger.info("Equality-of-opening proof rejected")
    return ok

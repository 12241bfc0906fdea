"""
Schnorr Proofs of Linear Relations
==================================

A generic Schnorr protocol proving knowledge of witnesses w_1..w_k satisfying
a list of relations, each of the form

    target = ∏_{(base, j) ∈ terms} base^{w_j}

in any of G1, G2 or GT. Several relations may share witness indices, which
is how equality of discrete logs across relations is expressed.

Protocol:
---------
1. Commit:   sample blindings k_j, publish t = ∏ base^{k_j} per relation
2. Challenge: c (Fiat-Shamir, computed by the caller over its transcript)
3. Respond:  z_j = k_j + c · w_j
4. Verify:   ∏ base^{z_j} == t · target^c for every relation
"""

import logging
from typing import List, Sequence

from charm.toolbox.pairinggroup import PairingGroup, ZR

from .utils import all_in_group, multiexp, random_scalar, same_group

logger = logging.getLogger(__name__)


def relation(target, terms) -> dict:
    """
    Build a relation target = ∏ base^{w_idx}.

    Parameters
    ----------
    target : G1, G2 or GT
        The public value
    terms : iterable of (base, idx)
        Public bases and the index of the witness each is raised to
    """
    terms = tuple(terms)
    if not terms:
        raise ValueError("A relation needs at least one term")
    return {'target': target, 'terms': terms}


def evaluate(rel: dict, scalars: Sequence[ZR]):
    """Compute ∏ base^{scalars[idx]} for one relation."""
    bases = [base for base, _ in rel['terms']]
    exponents = [scalars[idx] for _, idx in rel['terms']]
    return multiexp(bases, exponents)


def holds(relations: Sequence[dict], witness: Sequence[ZR]) -> bool:
    """Check every relation directly against a witness."""
    return all(evaluate(rel, witness) == rel['target'] for rel in relations)


class LinearRelationProtocol:
    """
    Prover state for one run of the protocol.

    The blindings are sampled in init() and destroyed by gen_proof(), so a
    protocol object can answer exactly one challenge.
    """

    def __init__(self, relations: Sequence[dict], witness: Sequence[ZR], blindings: List[ZR]):
        self.relations = tuple(relations)
        self._witness = list(witness)
        self._blindings = blindings
        self.commitments = tuple(evaluate(rel, blindings) for rel in self.relations)

    @classmethod
    def init(cls, relations: Sequence[dict], witness: Sequence[ZR], group: PairingGroup, rng=None):
        """Sample one fresh blinding per witness and commit to them."""
        blindings = [random_scalar(group, rng) for _ in witness]
        return cls(relations, witness, blindings)

    def gen_proof(self, challenge: ZR) -> dict:
        """
        Respond to the challenge: z_j = k_j + c · w_j.

        Returns
        -------
        dict
            - 'commitments': the t values, one per relation
            - 'responses': the z values, one per witness
        """
        if self._blindings is None:
            raise RuntimeError("Blindings already consumed; start a new protocol run")
        responses = tuple(k + challenge * w for k, w in zip(self._blindings, self._witness))
        self._blindings = None
        self._witness = None
        return {
            'commitments': self.commitments,
            'responses': responses,
        }


def well_formed(relations: Sequence[dict], proof: dict, num_witnesses: int, group: PairingGroup) -> bool:
    """
    Check the shape of a proof before any group arithmetic touches it.

    Every commitment must live in the group of its relation target and every
    response must be a scalar. charm raises on mixed-group operations, so a
    commitment from the wrong group is rejected here instead.
    """
    commitments = proof['commitments']
    responses = proof['responses']
    if len(commitments) != len(relations) or len(responses) != num_witnesses:
        logger.debug("Proof shape mismatch: %d commitments, %d responses",
                     len(commitments), len(responses))
        return False
    if not all(same_group(t, rel['target'], group) for rel, t in zip(relations, commitments)):
        logger.debug("Commitment outside the group of its relation")
        return False
    if not all_in_group(responses, group.init(ZR, 0), group):
        logger.debug("Response is not a scalar")
        return False
    return True


def verify_relations(relations: Sequence[dict], proof: dict, challenge: ZR, num_witnesses: int,
                     group: PairingGroup) -> bool:
    """
    Check a Schnorr proof of linear relations.

    Parameters
    ----------
    relations : Sequence[dict]
        Relations rebuilt by the verifier from public data
    proof : dict
        Output of LinearRelationProtocol.gen_proof()
    challenge : ZR
        The challenge recomputed by the verifier
    num_witnesses : int
        Expected number of responses
    group : PairingGroup
        The pairing group

    Returns
    -------
    bool
        True iff ∏ base^{z_j} == t · target^c holds for every relation
    """
    if not well_formed(relations, proof, num_witnesses, group):
        return False

    for k, (rel, t) in enumerate(zip(relations, proof['commitments'])):
        if evaluate(rel, proof['responses']) != t * (rel['target'] ** challenge):
            logger.debug("Relation %d rejected", k)
            return False
    return True

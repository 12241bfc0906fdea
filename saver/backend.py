"""
Proof Backend
=============

The encryption circuit is proven through a ProofBackend capability:

    keygen(b, n, group)          -> (pk, vk)
    prove(pk, circuit, witness)  -> proof
    verify(vk, circuit, proof)   -> bool

Any object with these methods can be plugged into saver.encryption; no base
class is required.

SigmaProofBackend
-----------------
The backend shipped with the package proves the circuit with one
Fiat-Shamir Schnorr proof over G1 and GT:

- Linear constraints (ciphertext and phi) are proven directly.
- Digit ranges use a pairing-based set-membership argument
  (Camenisch-Chaabouni-shelat). At keygen a trapdoor x is sampled and every
  digit value k ∈ [0, b) is signed with a Boneh-Boyen signature

      A_k = g^{1/(x+k)},     X̂ = ĝ^{x}

  and x is discarded. For a digit m_i the prover publishes a re-randomised
  signature V_i = A_{m_i}^{v_i} and proves knowledge of (v_i, m_i) with

      e(V_i, X̂) = e(g, ĝ)^{v_i} · e(V_i, ĝ)^{-m_i}

  where m_i is the same witness used by the ciphertext relation of chunk i.
"""

import logging
from typing import Protocol, Sequence, Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR, pair

from .circuit import is_satisfied
from .errors import EncodingError
from .fs_oracles import H_enc
from .groups import get_generators
from .sigma import LinearRelationProtocol, relation, verify_relations, well_formed
from .utils import all_in_group, identity_like, random_scalar

logger = logging.getLogger(__name__)


class ProofBackend(Protocol):
    """Capability of a proof system able to prove the encryption circuit."""

    def keygen(self, b: int, n: int, group: PairingGroup, rng=None) -> Tuple[dict, dict]:
        ...

    def prove(self, pk: dict, circuit: dict, witness: Sequence[ZR], rng=None) -> dict:
        ...

    def verify(self, vk: dict, circuit: dict, proof: dict) -> bool:
        ...


def _range_relations(V: Sequence, range_indices: Sequence[int], offset: int, key: dict) -> tuple:
    """
    One GT relation per digit:

        e(V_k, X̂) = e(g, ĝ)^{w[offset+k]} · (e(V_k, ĝ)^{-1})^{w[idx_k]}
    """
    rels = []
    for k, (V_k, idx) in enumerate(zip(V, range_indices)):
        target = pair(V_k, key['X_hat'])
        inv_base = pair(V_k, key['g_hat']) ** -1
        rels.append(relation(target, [(key['e_g_g_hat'], offset + k), (inv_base, idx)]))
    return tuple(rels)


class SigmaProofBackend:
    """Pairing-based sigma-protocol backend for the encryption circuit."""

    name = 'bb-set-membership-sigma'

    def keygen(self, b: int, n: int, group: PairingGroup, rng=None) -> Tuple[dict, dict]:
        """
        Sign every digit value and derive the proving/verifying keys.

        Returns
        -------
        pk : dict
            vk fields plus 'signatures': (A_0, ..., A_{b-1})
        vk : dict
            - 'group', 'b', 'n', 'backend'
            - 'g', 'g_hat': generators of G1 and G2
            - 'X_hat': ĝ^{x}
            - 'e_g_g_hat': e(g, ĝ), precomputed

        Notes
        -----
        The trapdoor x lives only inside this call. Anyone knowing x could
        sign values outside [0, b).
        """
        p = int(group.order())
        g, g_hat = get_generators(group)

        x = random_scalar(group, rng, nonzero=True)
        x_int = int(x)
        while any((x_int + k) % p == 0 for k in range(b)):
            x = random_scalar(group, rng, nonzero=True)
            x_int = int(x)

        signatures = tuple(g ** group.init(ZR, pow(x_int + k, -1, p)) for k in range(b))

        vk = {
            'group': group,
            'b': b,
            'n': n,
            'backend': self.name,
            'g': g,
            'g_hat': g_hat,
            'X_hat': g_hat ** x,
            'e_g_g_hat': pair(g, g_hat),
        }
        pk = dict(vk, signatures=signatures)
        return pk, vk

    def prove(self, pk: dict, circuit: dict, witness: Sequence[ZR], rng=None) -> dict:
        """
        Prove that `witness` satisfies `circuit`.

        Returns
        -------
        dict
            - 'V': re-randomised digit signatures, one per range constraint
            - 'commitments': Schnorr commitments, one per relation
            - 'responses': one per witness (circuit witnesses, then the v_i)

        Raises
        ------
        EncodingError
            If the circuit does not match pk, or the witness does not satisfy
            the circuit. A false statement is never proven.
        """
        group = pk['group']
        if circuit['b'] != pk['b'] or circuit['n'] != pk['n']:
            raise EncodingError("Circuit parameters do not match the proving key")
        if not is_satisfied(circuit, witness):
            raise EncodingError("Witness does not satisfy the encryption circuit")

        offset = circuit['num_witnesses']
        V = []
        v_list = []
        for idx in circuit['range']:
            v = random_scalar(group, rng, nonzero=True)
            V.append(pk['signatures'][int(witness[idx])] ** v)
            v_list.append(v)
        V = tuple(V)

        relations = tuple(circuit['linear']) + _range_relations(V, circuit['range'], offset, pk)
        protocol = LinearRelationProtocol.init(relations, list(witness) + v_list, group, rng)
        challenge = H_enc(circuit['label'], circuit['b'], circuit['n'], relations, V,
                          protocol.commitments, group)

        proof = protocol.gen_proof(challenge)
        proof['V'] = V
        return proof

    def verify(self, vk: dict, circuit: dict, proof: dict) -> bool:
        """
        Verify a proof produced by prove().

        Returns False for any rejected or malformed proof; never raises for
        adversarial input.
        """
        group = vk['group']
        try:
            if circuit['b'] != vk['b'] or circuit['n'] != vk['n']:
                logger.debug("Circuit parameters do not match the verifying key")
                return False

            V = tuple(proof['V'])
            if len(V) != len(circuit['range']):
                logger.debug("Expected %d digit signatures, got %d", len(circuit['range']), len(V))
                return False
            if not all_in_group(V, vk['g'], group):
                logger.debug("Digit signature is not a G1 element")
                return False
            identity = identity_like(vk['g'], group)
            if any(V_k == identity for V_k in V):
                logger.debug("Digit signature is the identity")
                return False

            offset = circuit['num_witnesses']
            relations = tuple(circuit['linear']) + _range_relations(V, circuit['range'], offset, vk)
            if not well_formed(relations, proof, offset + len(V), group):
                return False
            challenge = H_enc(circuit['label'], circuit['b'], circuit['n'], relations, V,
                              proof['commitments'], group)
            return verify_relations(relations, proof, challenge, offset + len(V), group)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Malformed proof rejected: %s", e)
            return False

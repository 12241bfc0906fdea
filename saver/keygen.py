"""
Key and Generator Generation
============================

This module generates every public and secret parameter of a (b, n) SAVER
instance.

Generator set (public):
-----------------------
- Y_1, ..., Y_n, P_2 ∈ G1: bases of the digit commitment
      phi = ∏_{i=1}^n Y_i^{m_i} · P_2^{r}
- G, H ∈ G1 and G_i := G^{b^{n-i}}: bases of the whole-message commitment
      J = ∏_{i=1}^n G_i^{m_i} · H^{r'} = G^{m} · H^{r'}

The G_i are derived from (G, b, n) and are always re-derived and checked,
never trusted as given.

Encryption keys:
----------------
- Secret s_1, ..., s_n ∈ Z_p
- ek: g ∈ G1 and X_i := g^{s_i}
- dk: the s_i plus a lookup table g^k -> k for every digit k ∈ [0, b)

Proving / verifying keys are produced by the proof backend for the (b, n)
encryption circuit.
"""

import logging
from typing import Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1

from .backend import ProofBackend, SigmaProofBackend
from .config import config as default_config
from .errors import GeneratorMismatchError
from .groups import setup as setup_group
from .utils import encode_element, random_scalar

logger = logging.getLogger(__name__)


def is_power_of_two(b: int) -> bool:
    return b > 0 and (b & (b - 1)) == 0


def commitment_key(G: G1, b: int, n: int, group: PairingGroup) -> Tuple[G1, ...]:
    """
    Create the multiples (G_1, ..., G_n) with G_i = G^{b^{n-i}}.

    Parameters
    ----------
    G : G1
        The base generator
    b : int
        The radix
    n : int
        The digit count
    group : PairingGroup
        The pairing group

    Returns
    -------
    Tuple[G1, ...]
        (G^{b^{n-1}}, ..., G^{b}, G)

    Notes
    -----
    For a power-of-two radix, each step multiplies the exponent by b using
    log2(b) squarings. Otherwise each G_i is computed by one exponentiation.
    Both paths give the same key.
    """
    if is_power_of_two(b):
        log2 = b.bit_length() - 1
        gs = [G]
        for _ in range(1, n):
            curr = gs[-1]
            for _ in range(log2):
                curr = curr * curr
            gs.append(curr)
        gs.reverse()
        return tuple(gs)

    p = int(group.order())
    return tuple(G ** group.init(ZR, pow(b, n - i, p)) for i in range(1, n + 1))


def keygen_generators(b: int, n: int, group: PairingGroup, G: G1 = None, H: G1 = None) -> dict:
    """
    Generate the public generator set for a (b, n) instance.

    Parameters
    ----------
    b : int
        The digit radix
    n : int
        The digit count
    group : PairingGroup
        The pairing group
    G : G1, optional
        The base of the whole-message commitment. Random if None.
    H : G1, optional
        The blinding base of the whole-message commitment. Random if None.

    Returns
    -------
    dict
        - 'group', 'b', 'n'
        - 'G', 'H': whole-message commitment bases
        - 'G_list': (G_1, ..., G_n) with G_i = G^{b^{n-i}}
        - 'Y': (Y_1, ..., Y_n) digit bases of phi
        - 'P_2': blinding base of phi
    """
    if G is None:
        G = group.random(G1)
    if H is None:
        H = group.random(G1)

    return {
        'group': group,
        'b': b,
        'n': n,
        'G': G,
        'H': H,
        'G_list': commitment_key(G, b, n, group),
        'Y': tuple(group.random(G1) for _ in range(n)),
        'P_2': group.random(G1),
    }


def validate_generators(generators: dict) -> None:
    """
    Check that a generator set is well-formed for its (b, n).

    Raises
    ------
    GeneratorMismatchError
        If a field is missing, a vector has the wrong length, or G_list is
        not (G^{b^{n-1}}, ..., G).
    """
    missing = [k for k in ('group', 'b', 'n', 'G', 'H', 'G_list', 'Y', 'P_2') if k not in generators]
    if missing:
        raise GeneratorMismatchError(f"Generator set is missing {', '.join(missing)}")

    n = generators['n']
    if len(generators['Y']) != n:
        raise GeneratorMismatchError(f"Expected {n} digit bases Y, got {len(generators['Y'])}")
    if len(generators['G_list']) != n:
        raise GeneratorMismatchError(f"Expected {n} bases G_i, got {len(generators['G_list'])}")

    expected = commitment_key(generators['G'], generators['b'], n, generators['group'])
    for i, (got, want) in enumerate(zip(generators['G_list'], expected), start=1):
        if got != want:
            raise GeneratorMismatchError(f"G_{i} is not G^(b^(n-{i}))")


def build_decryption_table(g: G1, b: int, group: PairingGroup) -> dict:
    """
    Precompute the lookup table encode(g^k) -> k for k ∈ [0, b).

    Built once per radix and shared read-only by every decryption.
    """
    table = {}
    curr = g ** group.init(ZR, 0)
    for k in range(b):
        table[encode_element(curr, group)] = k
        curr = curr * g
    return table


def keygen_encryption(b: int, n: int, group: PairingGroup, generators: dict, rng=None) -> Tuple[dict, dict]:
    """
    Generate the encryption/decryption key pair.

    Returns
    -------
    ek : dict
        - 'group', 'b', 'n'
        - 'g': ciphertext base in G1
        - 'X': (X_1, ..., X_n) with X_i = g^{s_i}
        - 'generators': the generator set used for phi
    dk : dict
        - 'group', 'b', 'n', 'g'
        - 's': (s_1, ..., s_n), secret
        - 'table': encode(g^k) -> k for k ∈ [0, b)
    """
    g = group.random(G1)
    s = tuple(random_scalar(group, rng, nonzero=True) for _ in range(n))
    X = tuple(g ** s_i for s_i in s)

    ek = {
        'group': group,
        'b': b,
        'n': n,
        'g': g,
        'X': X,
        'generators': generators,
    }
    dk = {
        'group': group,
        'b': b,
        'n': n,
        'g': g,
        's': s,
        'table': build_decryption_table(g, b, group),
    }
    return ek, dk


def setup(b: int, n: int, params: dict, backend: ProofBackend = None, rng=None) -> Tuple[dict, dict, dict, dict, dict]:
    """
    Set up a (b, n) SAVER instance.

    Parameters
    ----------
    b : int
        The digit radix (power of two recommended)
    n : int
        The digit count
    params : dict
        The output of saver.groups.setup()
    backend : ProofBackend, optional
        The proof backend. Defaults to SigmaProofBackend.
    rng : object, optional
        Randomness source with randrange(); group RNG if None

    Returns
    -------
    tuple
        (pk, vk, ek, dk, generators). vk carries ek so that verification
        only needs the verifying key.

    Raises
    ------
    ValueError
        If b < 2 or n < 1
    GeneratorMismatchError
        If the generated parameters are inconsistent
    """
    if b < 2:
        raise ValueError(f"Radix b={b} must be at least 2")
    if n < 1:
        raise ValueError(f"Digit count n={n} must be at least 1")
    if not is_power_of_two(b):
        logger.warning("Radix %d is not a power of two", b)

    group = params['group']
    order = int(group.order())
    if b ** n < order:
        logger.info("(b=%d, n=%d) covers messages below %d only", b, n, b ** n)

    if backend is None:
        backend = SigmaProofBackend()

    generators = keygen_generators(b, n, group)
    validate_generators(generators)

    ek, dk = keygen_encryption(b, n, group, generators, rng)
    pk, vk = backend.keygen(b, n, group, rng)
    vk = dict(vk, ek=ek)

    logger.debug("SAVER setup done for b=%d, n=%d on %s", b, n, params.get('group_name'))
    return pk, vk, ek, dk, generators


def setup_from_config(cfg=None, backend: ProofBackend = None, rng=None) -> Tuple[dict, dict, dict, dict, dict]:
    """Run setup() with the curve, radix and digit count of a Config."""
    if cfg is None:
        cfg = default_config
    params = setup_group(cfg.curve)
    n = cfg.digits_for(params['order'])
    return setup(cfg.radix, n, params, backend=backend, rng=rng)

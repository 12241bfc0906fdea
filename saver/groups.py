"""
Group Initialization and Setup
===============================

This module handles the initialization of the pairing groups used by SAVER.

According to charm-crypto documentation (https://jhuisi.github.io/charm/tutorial.html):
- PairingGroup('MNT224') provides asymmetric Type-3 pairings with 224-bit base field
- Alternative curves: 'BN254', 'SS512' (symmetric, but can be used)
- G1, G2 are the source groups; GT is the target group
- Pairing operation: pair(g1_elem, g2_elem) -> GT element

Ciphertexts, commitments and generators live in G1. G2 and GT are only used
by the digit range argument of the proof backend.
"""

import logging

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

logger = logging.getLogger(__name__)

FALLBACK_CURVES = ('BN254', 'SS512')


def setup(group_name: str = 'MNT224') -> dict:
    """
    Initialize the pairing group for SAVER.

    Parameters
    ----------
    group_name : str, optional
        The pairing curve identifier. Default is 'MNT224'.
        Supported curves:
        - 'MNT224': Asymmetric Type-3, 224-bit base field (preferred)
        - 'BN254': Asymmetric Type-3, 254-bit base field (fallback)
        - 'SS512': Symmetric, 512-bit base field (fallback)

    Returns
    -------
    dict
        A dictionary containing:
        - 'group': The PairingGroup object
        - 'group_name': The name of the curve actually used
        - 'order': The group order p as a Python int
        - 'G1', 'G2', 'GT', 'ZR': The charm group type constants
        - 'pair': The pairing function

    Notes
    -----
    If the requested curve cannot be loaded, the fallback curves are tried in
    order and a warning is logged. The message space is [0, order).

    Examples
    --------
    >>> params = setup('MNT224')
    >>> group = params['group']
    >>> p = params['order']
    """
    group = None
    for candidate in (group_name,) + tuple(c for c in FALLBACK_CURVES if c != group_name):
        try:
            group = PairingGroup(candidate)
        except Exception as e:
            logger.warning("Pairing curve %s not available (%s)", candidate, e)
            continue
        if candidate != group_name:
            logger.warning("Falling back from %s to %s", group_name, candidate)
        group_name = candidate
        break

    if group is None:
        raise RuntimeError("No pairing curve could be initialized")

    return {
        'group': group,
        'group_name': group_name,
        'order': int(group.order()),
        'G1': G1,
        'G2': G2,
        'GT': GT,
        'ZR': ZR,
        'pair': pair,
    }


def get_generators(group: PairingGroup) -> tuple:
    """
    Sample a random generator of G1 and of G2.

    Returns
    -------
    tuple
        (g, g_hat) with g ∈ G1 and g_hat ∈ G2
    """
    g = group.random(G1)
    g_hat = group.random(G2)
    return g, g_hat

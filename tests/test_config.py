"""Tests for environment-driven configuration and setup_from_config()."""

import pytest

from saver import decrypt, encrypt, setup, setup_from_config, setup_group, verify
from saver.config import Config
from saver.decompose import chunks_count


def test_radix_from_chunk_bit_size():
    cfg = Config()
    cfg.chunk_bit_size = 4
    assert cfg.radix == 16


def test_digits_for_explicit_count():
    cfg = Config()
    cfg.digit_count = 3
    assert cfg.digits_for(2 ** 200) == 3


def test_digits_cover_field_when_unset():
    cfg = Config()
    cfg.chunk_bit_size = 8
    cfg.digit_count = None
    order = 2 ** 223 + 5
    assert cfg.digits_for(order) == chunks_count(8, order) == 28


def test_setup_from_config():
    cfg = Config()
    cfg.curve = 'MNT224'
    cfg.chunk_bit_size = 4
    cfg.digit_count = 3

    pk, vk, ek, dk, generators = setup_from_config(cfg)
    assert (ek['b'], ek['n']) == (16, 3)

    ct, commitment, proof = encrypt(325, ek, pk)
    assert decrypt(ct, dk) == 325
    assert verify(ct, commitment, proof, vk)


@pytest.mark.parametrize("b, n", [(1, 3), (16, 0)])
def test_invalid_parameters(b, n):
    with pytest.raises(ValueError):
        setup(b, n, setup_group('MNT224'))

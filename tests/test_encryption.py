"""
End-to-End Tests for SAVER Encryption
=====================================

Test Coverage:
--------------
1. Round trip: decrypt(encrypt(m)) == m
2. Verification of honest encryptions
3. Rejection of tampered ciphertexts, commitments and proofs
4. Range errors for messages that do not fit (b, n)
5. Decryption errors for wrong keys and corrupted ciphertexts
6. Verifiable decryption
7. Concurrent encryption with shared, read-only keys
"""

import random
import secrets
from concurrent.futures import ThreadPoolExecutor

import pytest
from charm.toolbox.pairinggroup import ZR

from saver import decrypt, encrypt, setup, setup_group, verify
from saver.encryption import decrypt_with_proof, verify_decryption
from saver.errors import DecryptionError, EncodingError, RangeError


B, N = 16, 3


class TestSaverEncryption:
    """Test suite for encrypt / decrypt / verify with b=16, n=3."""

    @pytest.fixture(scope="class")
    def setup_system(self):
        """
        Setup a complete SAVER instance.

        Returns
        -------
        dict
            System components: params, group, pk, vk, ek, dk, generators
        """
        params = setup_group('MNT224')
        pk, vk, ek, dk, generators = setup(B, N, params)
        return {
            'params': params,
            'group': params['group'],
            'pk': pk,
            'vk': vk,
            'ek': ek,
            'dk': dk,
            'generators': generators,
        }

    def test_example_scenario(self, setup_system):
        """b=16, n=3, m=325: decrypts to 325 and verifies."""
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])

        assert len(ct['c']) == N
        assert decrypt(ct, s['dk']) == 325
        assert verify(ct, commitment, proof, s['vk'])

    @pytest.mark.parametrize("m", [0, 1, 15, 16, 255, 256, 4000, 16 ** 3 - 1])
    def test_round_trip(self, setup_system, m):
        s = setup_system
        ct, commitment, proof = encrypt(m, s['ek'], s['pk'])
        assert decrypt(ct, s['dk']) == m
        assert verify(ct, commitment, proof, s['vk'])

    def test_seeded_rng(self, setup_system):
        """An injected randomness source is used for every sample."""
        s = setup_system
        ct_1, c_1, _ = encrypt(42, s['ek'], s['pk'], rng=random.Random(7))
        ct_2, c_2, _ = encrypt(42, s['ek'], s['pk'], rng=random.Random(7))
        assert ct_1 == ct_2
        assert c_1['randomness'] == c_2['randomness']

    def test_fresh_randomness_per_call(self, setup_system):
        s = setup_system
        ct_1, c_1, _ = encrypt(42, s['ek'], s['pk'])
        ct_2, c_2, _ = encrypt(42, s['ek'], s['pk'])
        assert ct_1['c_0'] != ct_2['c_0']
        assert c_1['value'] != c_2['value']

    def test_verify_accepts_bare_phi(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(99, s['ek'], s['pk'])
        assert verify(ct, commitment['value'], proof, s['vk'])

    # ------------------------------------------------------------------
    # Range errors
    # ------------------------------------------------------------------

    def test_one_over_max_is_range_error(self, setup_system):
        s = setup_system
        with pytest.raises(RangeError):
            encrypt(B ** N, s['ek'], s['pk'])

    def test_range_error_is_encoding_error(self, setup_system):
        s = setup_system
        with pytest.raises(EncodingError):
            encrypt(-3, s['ek'], s['pk'])

    def test_message_above_group_order(self, setup_system):
        s = setup_system
        with pytest.raises(RangeError):
            encrypt(int(s['group'].order()), s['ek'], s['pk'])

    # ------------------------------------------------------------------
    # Rejection
    # ------------------------------------------------------------------

    def test_tampered_c0_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'] * s['ek']['g'], 'c': ct['c']}
        assert verify(bad, commitment, proof, s['vk']) is False

    @pytest.mark.parametrize("i", range(N))
    def test_tampered_chunk_rejected(self, setup_system, i):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        chunks = list(ct['c'])
        chunks[i] = chunks[i] * s['ek']['g']
        bad = {'c_0': ct['c_0'], 'c': tuple(chunks)}
        assert verify(bad, commitment, proof, s['vk']) is False

    def test_swapped_chunks_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'], 'c': (ct['c'][1], ct['c'][0], ct['c'][2])}
        assert verify(bad, commitment, proof, s['vk']) is False

    def test_tampered_commitment_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad_phi = commitment['value'] * s['generators']['P_2']
        assert verify(ct, bad_phi, proof, s['vk']) is False

    def test_commitment_from_other_encryption_rejected(self, setup_system):
        s = setup_system
        ct, _, proof = encrypt(325, s['ek'], s['pk'])
        _, other_commitment, _ = encrypt(325, s['ek'], s['pk'])
        assert verify(ct, other_commitment, proof, s['vk']) is False

    def test_tampered_response_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        responses = list(proof['responses'])
        responses[1] = responses[1] + s['group'].init(ZR, 1)
        bad = dict(proof, responses=tuple(responses))
        assert verify(ct, commitment, bad, s['vk']) is False

    def test_tampered_schnorr_commitment_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        commitments = list(proof['commitments'])
        commitments[0] = commitments[0] * s['ek']['g']
        bad = dict(proof, commitments=tuple(commitments))
        assert verify(ct, commitment, bad, s['vk']) is False

    def test_proof_from_other_encryption_rejected(self, setup_system):
        s = setup_system
        ct, commitment, _ = encrypt(325, s['ek'], s['pk'])
        _, _, other_proof = encrypt(325, s['ek'], s['pk'])
        assert verify(ct, commitment, other_proof, s['vk']) is False

    def test_wrong_chunk_count_is_malformed_input(self, setup_system):
        """Malformed input raises; it is not reported as a rejected proof."""
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'], 'c': ct['c'][:2]}
        with pytest.raises(EncodingError):
            verify(bad, commitment, proof, s['vk'])

    # ------------------------------------------------------------------
    # Decryption errors
    # ------------------------------------------------------------------

    def test_wrong_key_is_decryption_error(self, setup_system):
        s = setup_system
        other_dk = setup(B, N, s['params'])[3]
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        with pytest.raises(DecryptionError):
            decrypt(ct, other_dk)

    def test_corrupted_ciphertext_is_decryption_error(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'], 'c': (ct['c'][0], ct['c'][1] * s['generators']['H'], ct['c'][2])}
        with pytest.raises(DecryptionError) as excinfo:
            decrypt(bad, s['dk'])
        assert '325' not in str(excinfo.value)

    def test_out_of_range_digit_is_decryption_error(self, setup_system):
        """A chunk holding g^b (one past the last digit) is detected, not wrapped."""
        s = setup_system
        ct, _, _ = encrypt(0, s['ek'], s['pk'])
        g = s['ek']['g']
        bad = {'c_0': ct['c_0'], 'c': (ct['c'][0] * (g ** s['group'].init(ZR, B)),) + tuple(ct['c'][1:])}
        with pytest.raises(DecryptionError):
            decrypt(bad, s['dk'])

    # ------------------------------------------------------------------
    # Verifiable decryption
    # ------------------------------------------------------------------

    def test_decryption_proof(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        m, proof = decrypt_with_proof(ct, s['dk'], s['ek'])
        assert m == 325
        assert verify_decryption(ct, m, proof, s['ek'])

    def test_decryption_proof_wrong_message(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        m, proof = decrypt_with_proof(ct, s['dk'], s['ek'])
        assert not verify_decryption(ct, 326, proof, s['ek'])
        assert not verify_decryption(ct, B ** N, proof, s['ek'])

    def test_decryption_proof_other_ciphertext(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        other_ct, _, _ = encrypt(325, s['ek'], s['pk'])
        m, proof = decrypt_with_proof(ct, s['dk'], s['ek'])
        assert not verify_decryption(other_ct, m, proof, s['ek'])

    # ------------------------------------------------------------------
    # Concurrency
    # ------------------------------------------------------------------

    def test_parallel_encryptions(self, setup_system):
        """Keys are shared read-only; each call samples its own randomness."""
        s = setup_system
        messages = [3, 325, 1000, 4095]

        def run(m):
            ct, commitment, proof = encrypt(m, s['ek'], s['pk'], rng=secrets.SystemRandom())
            return decrypt(ct, s['dk']), verify(ct, commitment, proof, s['vk'])

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(run, messages))

        assert results == [(m, True) for m in messages]

    # ------------------------------------------------------------------
    # Malformed input and elements from the wrong group
    # ------------------------------------------------------------------

    def test_g2_digit_signature_in_proof_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = dict(proof, V=(s['vk']['g_hat'],) + tuple(proof['V'][1:]))
        assert verify(ct, commitment, bad, s['vk']) is False

    def test_g2_schnorr_commitment_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        commitments = (s['vk']['g_hat'],) + tuple(proof['commitments'][1:])
        assert verify(ct, commitment, dict(proof, commitments=commitments), s['vk']) is False

    def test_group_element_response_rejected(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        responses = (s['ek']['g'],) + tuple(proof['responses'][1:])
        assert verify(ct, commitment, dict(proof, responses=responses), s['vk']) is False

    @pytest.mark.parametrize("field", ['c_0', 'c'])
    def test_missing_field_is_encoding_error(self, setup_system, field):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = dict(ct)
        del bad[field]
        with pytest.raises(EncodingError):
            verify(bad, commitment, proof, s['vk'])

    def test_non_sequence_chunks_is_encoding_error(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        with pytest.raises(EncodingError):
            verify({'c_0': ct['c_0'], 'c': 5}, commitment, proof, s['vk'])

    def test_g2_chunk_is_encoding_error(self, setup_system):
        s = setup_system
        ct, commitment, proof = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'], 'c': (s['vk']['g_hat'],) + tuple(ct['c'][1:])}
        with pytest.raises(EncodingError):
            verify(bad, commitment, proof, s['vk'])

    def test_g2_commitment_is_encoding_error(self, setup_system):
        s = setup_system
        ct, _, proof = encrypt(325, s['ek'], s['pk'])
        with pytest.raises(EncodingError):
            verify(ct, s['vk']['g_hat'], proof, s['vk'])

    def test_decrypt_g2_chunk_is_decryption_error(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        bad = {'c_0': ct['c_0'], 'c': tuple(ct['c'][:2]) + (s['vk']['g_hat'],)}
        with pytest.raises(DecryptionError):
            decrypt(bad, s['dk'])

    def test_decrypt_missing_field_is_decryption_error(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        with pytest.raises(DecryptionError):
            decrypt({'c': ct['c']}, s['dk'])

    def test_verify_decryption_malformed_ciphertext(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        m, proof = decrypt_with_proof(ct, s['dk'], s['ek'])
        g2_chunk = {'c_0': ct['c_0'], 'c': (s['vk']['g_hat'],) + tuple(ct['c'][1:])}
        assert verify_decryption(g2_chunk, m, proof, s['ek']) is False
        assert verify_decryption({'c_0': ct['c_0']}, m, proof, s['ek']) is False

    def test_verify_decryption_g2_commitment(self, setup_system):
        s = setup_system
        ct, _, _ = encrypt(325, s['ek'], s['pk'])
        m, proof = decrypt_with_proof(ct, s['dk'], s['ek'])
        commitments = (s['vk']['g_hat'],) + tuple(proof['commitments'][1:])
        assert verify_decryption(ct, m, dict(proof, commitments=commitments), s['ek']) is False

"""
기반 모듈 테스트: field.py, transcript.py, commitments.py
"""

import random

import pytest

from zkp.spartan.commitments import commit, commit_with, poly_commit, row_combination, split_point
from zkp.spartan.field import (
    FR, CURVE_ORDER, G1,
    ec_add, ec_msm, ec_mul, ec_neg, ec_sub,
    hash_to_g1, inner_product, is_on_curve, point_to_bytes, random_fr, scalar_to_bytes,
)
from zkp.spartan.params import MultiCommitmentSetupParameters, PolyCommitmentSetupParameters
from zkp.spartan.polynomial import evaluate_value
from zkp.spartan.transcript import CHALLENGE_BYTES, Transcript


# =====================================================================
# G1 operations
# =====================================================================

class TestEC:
    def test_mul_zero_is_identity(self):
        assert ec_mul(G1, FR(0)) is None
        assert ec_mul(None, FR(5)) is None

    def test_mul_matches_repeated_add(self):
        assert ec_mul(G1, 3) == ec_add(ec_add(G1, G1), G1)

    def test_sub_self_is_identity(self):
        P = ec_mul(G1, 11)
        assert ec_sub(P, P) is None
        assert ec_add(P, ec_neg(P)) is None

    def test_msm_matches_naive_sum(self):
        P = ec_mul(G1, 7)
        Q = ec_mul(G1, 13)
        expected = ec_add(ec_mul(P, 2), ec_mul(Q, 3))
        assert ec_msm([P, Q], [FR(2), FR(3)]) == expected

    def test_msm_skips_identity_and_zero(self):
        assert ec_msm([None, G1], [FR(4), FR(0)]) is None

    def test_msm_length_mismatch(self):
        with pytest.raises(ValueError):
            ec_msm([G1], [FR(1), FR(2)])


class TestHashToG1:
    def test_on_curve(self):
        for i in range(4):
            assert is_on_curve(hash_to_g1(b"test", i))

    def test_deterministic(self):
        assert hash_to_g1(b"test", 3) == hash_to_g1(b"test", 3)

    def test_label_and_index_separate(self):
        assert hash_to_g1(b"test", 0) != hash_to_g1(b"test", 1)
        assert hash_to_g1(b"test", 0) != hash_to_g1(b"other", 0)


class TestEncoding:
    def test_scalar_bytes(self):
        assert scalar_to_bytes(FR(1)) == b"\x00" * 31 + b"\x01"
        assert len(scalar_to_bytes(FR(CURVE_ORDER - 1))) == 32

    def test_identity_point_bytes(self):
        assert point_to_bytes(None) == b"\x00" * 64

    def test_point_bytes(self):
        assert point_to_bytes(G1) == (1).to_bytes(32, "big") + (2).to_bytes(32, "big")

    def test_random_fr_reproducible(self):
        assert random_fr(random.Random(3)) == random_fr(random.Random(3))


# =====================================================================
# Transcript
# =====================================================================

class TestTranscript:
    def _run(self, label=b"test", message=b"hello"):
        t = Transcript(label)
        t.append_message(b"msg", message)
        t.append_scalar(b"s", FR(42))
        t.append_point(b"p", G1)
        return t

    def test_same_inputs_same_challenge(self):
        assert self._run().challenge_scalar(b"c") == self._run().challenge_scalar(b"c")

    def test_label_changes_challenge(self):
        assert self._run(label=b"a").challenge_scalar(b"c") != self._run(label=b"b").challenge_scalar(b"c")

    def test_message_changes_challenge(self):
        assert self._run(message=b"x").challenge_scalar(b"c") != self._run(message=b"y").challenge_scalar(b"c")

    def test_successive_challenges_differ(self):
        t = self._run()
        assert t.challenge_scalar(b"c") != t.challenge_scalar(b"c")

    def test_challenge_width(self):
        t = self._run()
        for r in t.challenge_vector(b"c", 8):
            assert int(r) < 2 ** (8 * CHALLENGE_BYTES)

    def test_challenge_bytes_length(self):
        assert len(self._run().challenge_bytes(b"c", 100)) == 100


# =====================================================================
# Pedersen / Hyrax commitments
# =====================================================================

class TestCommitments:
    @pytest.fixture(scope="class")
    def gens(self):
        return MultiCommitmentSetupParameters.generate(4, b"test-commit")

    def test_generate_sizes(self, gens):
        assert gens.size == 4
        assert gens.h not in gens.generators

    def test_split_shares_h(self, gens):
        left, right = gens.split_at(3)
        assert left.size == 3 and right.size == 1
        assert left.h == right.h == gens.h

    def test_homomorphic(self, gens):
        v1, v2 = [FR(1), FR(2)], [FR(5), FR(7)]
        c1 = commit_with(gens, v1, FR(3))
        c2 = commit_with(gens, v2, FR(4))
        assert ec_add(c1, c2) == commit_with(gens, [FR(6), FR(9)], FR(7))

    def test_blind_hides(self, gens):
        assert commit_with(gens, [FR(1)], FR(1)) != commit_with(gens, [FR(1)], FR(2))

    def test_too_many_values(self, gens):
        with pytest.raises(ValueError):
            commit(gens.generators, [FR(1)] * 5, gens.h, FR(0))

    def test_poly_commit_rows(self, rng):
        params = PolyCommitmentSetupParameters.generate(3, b"test-pc")
        assert (params.num_rows, params.row_size) == (2, 4)
        values = [FR(i) for i in range(8)]
        commits, blinds = poly_commit(params, values, rng=rng)
        assert len(commits) == len(blinds) == 2
        assert commits[1] == commit_with(params.gen_n, values[4:], blinds[1])

    def test_poly_commit_wrong_length(self):
        params = PolyCommitmentSetupParameters.generate(2, b"test-pc")
        with pytest.raises(ValueError):
            poly_commit(params, [FR(1)] * 3)

    def test_row_combination_evaluates(self, rng):
        """⟨Σ L[i]·rowᵢ, R⟩ 는 다중선형 평가값과 같다."""
        params = PolyCommitmentSetupParameters.generate(4, b"test-pc")
        values = [random_fr(rng) for _ in range(16)]
        point = [random_fr(rng) for _ in range(4)]
        left_eq, right_eq = split_point(params, point)
        lz = row_combination(params, values, left_eq)
        assert inner_product(lz, right_eq) == evaluate_value(values, point)

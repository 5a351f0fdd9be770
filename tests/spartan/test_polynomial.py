"""
다항식 유틸리티 테스트: UniPoly, eq 테이블, 다중선형 평가
"""

import pytest

from zkp.spartan.field import FR, random_fr
from zkp.spartan.polynomial import (
    UniPoly,
    bound_poly_var_bot,
    bound_poly_var_top,
    combine_n_to_one,
    equalize_length,
    eval_eq,
    eval_eq_x_y,
    evaluate_mle,
    evaluate_value,
    is_power_of_2,
    log2,
    next_power_of_2,
)


class TestUniPoly:
    def test_from_evals_quadratic(self):
        p = UniPoly.from_evals([FR(1), FR(3), FR(7)])
        assert p.coeffs == [FR(1), FR(1), FR(1)]

    def test_from_evals_keeps_length(self):
        """최고차 계수가 0이어도 계수 개수는 유지된다."""
        p = UniPoly.from_evals([FR(2)] * 4)
        assert len(p) == 4
        assert p.degree == 3
        assert p.coeffs[1:] == [FR(0)] * 3

    def test_interpolation_roundtrip(self, rng):
        evals = [random_fr(rng) for _ in range(4)]
        p = UniPoly.from_evals(evals)
        for x, e in enumerate(evals):
            assert p.evaluate(FR(x)) == e

    def test_eval_at_zero_and_one(self):
        p = UniPoly([FR(4), FR(5), FR(6)])
        assert p.eval_at_zero() == FR(4)
        assert p.eval_at_one() == FR(15)

    def test_equality(self):
        assert UniPoly([1, 2]) == UniPoly([FR(1), FR(2)])
        assert UniPoly([1, 2]) != UniPoly([1, 2, 0])


class TestSizes:
    @pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (3, 4), (4, 4), (11, 16)])
    def test_next_power_of_2(self, n, expected):
        assert next_power_of_2(n) == expected

    def test_is_power_of_2(self):
        assert is_power_of_2(8)
        assert not is_power_of_2(6)
        assert not is_power_of_2(0)

    def test_log2(self):
        assert log2(1) == 0
        assert log2(32) == 5

    def test_log2_rejects(self):
        with pytest.raises(ValueError):
            log2(12)


class TestMultilinear:
    def test_eq_table_sums_to_one(self, rng):
        r = [random_fr(rng) for _ in range(3)]
        total = FR(0)
        for e in eval_eq(r):
            total = total + e
        assert total == FR(1)

    def test_eq_table_msb_first(self):
        """r[0]이 최상위 비트: eq([1, 0], b)는 b = 0b10 에서만 1."""
        assert eval_eq([FR(1), FR(0)]) == [FR(0), FR(0), FR(1), FR(0)]

    def test_eq_x_y_matches_table(self, rng):
        r = [random_fr(rng) for _ in range(3)]
        table = eval_eq(r)
        point = [FR(1), FR(0), FR(1)]
        assert eval_eq_x_y(r, point) == table[0b101]

    def test_evaluate_on_hypercube(self):
        values = [FR(v) for v in (10, 20, 30, 40)]
        assert evaluate_value(values, [FR(1), FR(0)]) == FR(30)

    def test_evaluate_length_mismatch(self):
        with pytest.raises(ValueError):
            evaluate_value([FR(1)] * 3, [FR(0), FR(1)])

    def test_bind_top_then_evaluate(self, rng):
        values = [random_fr(rng) for _ in range(8)]
        r = [random_fr(rng) for _ in range(3)]
        bound = bound_poly_var_top(values, r[0])
        assert evaluate_value(bound, r[1:]) == evaluate_value(values, r)

    def test_bind_bot_then_evaluate(self, rng):
        values = [random_fr(rng) for _ in range(8)]
        r = [random_fr(rng) for _ in range(3)]
        bound = bound_poly_var_bot(values, r[-1])
        assert evaluate_value(bound, r[:-1]) == evaluate_value(values, r)

    def test_combine_n_to_one(self, rng):
        evals = [random_fr(rng) for _ in range(4)]
        cs = [random_fr(rng) for _ in range(2)]
        assert combine_n_to_one(evals, cs) == evaluate_value(evals, cs)

    def test_sparse_mle_matches_dense(self, rng):
        matrix = [(0, 1, FR(3)), (1, 3, FR(5)), (1, 0, FR(7))]
        dense = [FR(0)] * 8
        for row, col, val in matrix:
            dense[row * 4 + col] = val
        rx = [random_fr(rng)]
        ry = [random_fr(rng) for _ in range(2)]
        assert evaluate_mle(matrix, rx, ry) == evaluate_value(dense, rx + ry)

    def test_equalize_length(self):
        rx, ry = equalize_length([FR(5)], [FR(1), FR(2), FR(3)])
        assert rx == [FR(0), FR(0), FR(5)]
        assert ry == [FR(1), FR(2), FR(3)]

"""
R1CS 합성 및 예제 회로 테스트
"""

import pytest

from zkp.spartan.circuits import SQUAT, TALL, build_circuit, mini_circuit, multiply_circuit
from zkp.spartan.errors import MissingAssignment
from zkp.spartan.field import FR
from zkp.spartan.r1cs import ConstraintSystem, LinearCombination, ONE, Assignment


class TestConstraintSystem:
    def test_linear_combination_evaluate(self):
        cs = ConstraintSystem()
        x = cs.alloc(4)
        y = cs.alloc_input(9)
        lc = LinearCombination.of(x) + (3, ONE) - y
        assert lc.evaluate(cs.aux_values, cs.input_values) == FR(4 + 3 - 9)

    def test_subtract_linear_combination(self):
        cs = ConstraintSystem()
        x = cs.alloc(7)
        y = cs.alloc(2)
        lc = LinearCombination.of(x) - (LinearCombination.of(y) + (3, ONE))
        assert lc.evaluate(cs.aux_values, cs.input_values) == FR(7 - 2 - 3)

    def test_duplicate_terms_merged(self):
        cs = ConstraintSystem()
        x = cs.alloc(2)
        cs.enforce(LinearCombination.of(x) + x, ONE, LinearCombination.of(x) + (2, x))
        instance = cs.to_instance()
        assert instance.a_matrix == ((0, 0, FR(2)),)
        assert instance.c_matrix == ((0, 0, FR(3)),)

    def test_missing_assignment(self):
        cs = multiply_circuit()
        with pytest.raises(MissingAssignment):
            cs.assignment()


class TestMultiplyCircuit:
    def test_squat_sizes(self):
        instance = multiply_circuit(3, 5, **SQUAT).to_instance()
        assert instance.num_constraints == 8
        assert instance.num_aux == 10
        assert instance.num_inputs == 1
        assert instance.num_vars == 16
        assert instance.num_nz_entries == 8
        assert instance.num_rounds_x == 3
        assert instance.num_rounds_y == 5
        assert instance.num_cells == 32

    def test_tall_sizes(self):
        instance = multiply_circuit(3, 5, **TALL).to_instance()
        assert instance.num_constraints == 16
        assert instance.num_aux == 5
        assert instance.num_vars == 8
        assert instance.num_nz_entries == 16

    def test_public_input_column(self):
        """공개 입력 c는 열 t + 1, 상수 ONE은 열 t."""
        instance = multiply_circuit(3, 5, **SQUAT).to_instance()
        assert all(col == 16 + 1 for _, col, _ in instance.c_matrix)

    def test_satisfied(self):
        cs = multiply_circuit(3, 5)
        instance, assignment = cs.to_instance(), cs.assignment()
        assert assignment.inputs == (FR(15),)
        assert assignment.is_satisfied(instance)

    def test_wrong_output_not_satisfied(self):
        cs = multiply_circuit(3, 5)
        instance, assignment = cs.to_instance(), cs.assignment()
        forged = Assignment(aux=assignment.aux, inputs=(FR(16),))
        assert not forged.is_satisfied(instance)

    def test_setup_instance_matches_witness_instance(self):
        assert multiply_circuit().to_instance() == multiply_circuit(3, 5).to_instance()

    def test_z_vector_layout(self):
        cs = multiply_circuit(3, 5)
        instance, assignment = cs.to_instance(), cs.assignment()
        z = assignment.z_vector(instance)
        assert len(z) == 32
        assert z[:3] == [FR(3), FR(5), FR(3)]
        assert z[10:16] == [FR(0)] * 6
        assert z[16:18] == [FR(1), FR(15)]


class TestMiniCircuit:
    def test_constant_term(self):
        cs = mini_circuit(3, 4)
        instance, assignment = cs.to_instance(), cs.assignment()
        assert assignment.inputs == (FR(18),)
        assert instance.b_matrix == ((0, 1, FR(1)), (0, instance.num_vars, FR(2)))
        assert assignment.is_satisfied(instance)

    def test_build_by_name(self):
        cs = build_circuit("mini", {"x": 2, "y": 1})
        assert cs.assignment().inputs == (FR(6),)

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            build_circuit("cubic")

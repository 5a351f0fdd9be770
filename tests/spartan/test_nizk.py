"""
Spartan NIZK End-to-End 테스트
================================

회로: a · b = c (a = 3, b = 5), 제약 6개 / 변수 11개

테스트 범위:
  - 완전성: 정상 증명은 [c] 로 검증 성공
  - 입력 바인딩: [a] 나 다른 값으로는 실패
  - 결정성: 같은 증명을 새 트랜스크립트로 다시 검증하면 같은 챌린지와 결과
  - 오류 분류: 공개 입력 개수 오류(MalformedProof), 파라미터 크기 불일치(ParameterMismatch)
"""

import random
from dataclasses import replace

import pytest

from zkp.spartan.circuits import TALL, mini_circuit, multiply_circuit
from zkp.spartan.errors import MalformedProof, ParameterMismatch
from zkp.spartan.field import FR, G1
from zkp.spartan import nizk
from zkp.spartan.polynomial import evaluate_mle
from zkp.spartan.r1cs import Assignment
from zkp.spartan.transcript import Transcript
from zkp.spartan.verifier import r1cs_satisfied_verify


A_VALUE = 3
C_VALUE = 15


class TestNIZKCompleteness:
    def test_verifies_with_output(self, nizk_bundle):
        assert nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])

    def test_accepts_field_element_inputs(self, nizk_bundle):
        assert nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [FR(C_VALUE)], nizk_bundle["proof"])

    def test_mini_circuit(self):
        cs = mini_circuit(3, 4)
        instance, assignment = cs.to_instance(), cs.assignment()
        params = nizk.generate_parameters(instance)
        proof = nizk.create_proof(params, instance, assignment, rng=random.Random(3))
        assert nizk.nizk_verify(params, instance, [18], proof)

    def test_proof_shape(self, nizk_bundle):
        proof, instance = nizk_bundle["proof"], nizk_bundle["instance"]
        sat = proof.r1cs_satisfied_proof
        assert len(proof.rx) == instance.num_rounds_x == 3
        assert len(proof.ry) == instance.num_rounds_y == 5
        assert len(sat.proof_one.comm_polys) == 3
        assert len(sat.proof_two.comm_polys) == 5
        assert len(sat.commit_witness) == nizk_bundle["params"].pc_params.num_rows


class TestNIZKSoundness:
    def test_rejects_wrong_public_input(self, nizk_bundle):
        assert not nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [A_VALUE], nizk_bundle["proof"])

    def test_rejects_off_by_one_input(self, nizk_bundle):
        assert not nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE + 1], nizk_bundle["proof"])

    def test_rejects_unsatisfying_assignment(self, nizk_bundle, squat_circuit):
        """만족하지 않는 할당으로 만든 증명은 주장한 공개 입력으로도 통과하지 못한다."""
        instance, assignment = squat_circuit
        forged = Assignment(aux=assignment.aux, inputs=(FR(C_VALUE + 1),))
        proof = nizk.create_proof(nizk_bundle["params"], instance, forged, rng=random.Random(4))
        assert not nizk.nizk_verify(nizk_bundle["params"], instance, [C_VALUE + 1], proof)

    def test_rejects_mismatched_point(self, nizk_bundle):
        proof = nizk_bundle["proof"]
        forged = replace(proof, rx=(proof.rx[0] + FR(1),) + proof.rx[1:])
        assert not nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], forged)

    def test_rejects_tampered_witness_commitment(self, nizk_bundle):
        proof = nizk_bundle["proof"]
        sat = proof.r1cs_satisfied_proof
        commits = (sat.commit_witness[1],) + (sat.commit_witness[0],) + sat.commit_witness[2:]
        forged = replace(proof, r1cs_satisfied_proof=replace(sat, commit_witness=commits))
        assert not nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], forged)


class TestNIZKDeterminism:
    def test_reverify_same_result(self, nizk_bundle):
        args = (nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])
        first = nizk.nizk_verify(*args)
        assert first is True
        assert nizk.nizk_verify(*args) == first

    def test_same_challenges(self, nizk_bundle):
        params, instance, proof = nizk_bundle["params"], nizk_bundle["instance"], nizk_bundle["proof"]
        evals = tuple(evaluate_mle(m, proof.rx, proof.ry) for m in instance.matrices)
        transcripts = []
        points = []
        for _ in range(2):
            t = Transcript(nizk.TRANSCRIPT_LABEL_NIZK)
            points.append(r1cs_satisfied_verify(params, instance, [C_VALUE], proof.r1cs_satisfied_proof, evals, t))
            transcripts.append(bytes(t.state))
        assert points[0] == points[1]
        assert transcripts[0] == transcripts[1]

    def test_seeded_prover_reproducible(self, nizk_bundle, squat_circuit):
        instance, assignment = squat_circuit
        params = nizk_bundle["params"]
        p1 = nizk.create_proof(params, instance, assignment, rng=random.Random(9))
        p2 = nizk.create_proof(params, instance, assignment, rng=random.Random(9))
        assert p1 == p2


class TestNIZKErrors:
    def test_wrong_input_count(self, nizk_bundle):
        with pytest.raises(MalformedProof):
            nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [], nizk_bundle["proof"])

    def test_parameters_for_other_instance(self, nizk_bundle):
        tall = multiply_circuit(**TALL).to_instance()
        small_params = nizk.generate_parameters(tall)
        with pytest.raises(ParameterMismatch):
            nizk.nizk_verify(small_params, nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])

    def test_label_separates_parameters(self, nizk_bundle):
        other = nizk.generate_parameters(nizk_bundle["instance"], label=b"other")
        assert other != nizk_bundle["params"]
        assert not nizk.nizk_verify(other, nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])

    @pytest.mark.parametrize("keep", [3, 2])
    def test_undersized_generators(self, nizk_bundle, keep):
        params = nizk_bundle["params"]
        pc = params.pc_params
        gen_n = replace(pc.gen_n, generators=pc.gen_n.generators[:keep])
        small = replace(params, pc_params=replace(pc, gen_n=gen_n))
        with pytest.raises(ParameterMismatch):
            nizk.nizk_verify(small, nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])

    def test_blinding_generator_mismatch(self, nizk_bundle):
        params = nizk_bundle["params"]
        pc = params.pc_params
        gen_n = replace(pc.gen_n, h=G1)
        forged = replace(params, pc_params=replace(pc, gen_n=gen_n))
        with pytest.raises(ParameterMismatch):
            nizk.nizk_verify(forged, nizk_bundle["instance"], [C_VALUE], nizk_bundle["proof"])

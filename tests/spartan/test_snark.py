"""
Spartan SNARK End-to-End 테스트
=================================

setup → index(encode) → prove → verify([c]) → True, verify([a]) → False
희소 행렬 인코딩의 크기 규칙과 인덱스 커밋먼트 바인딩을 함께 확인한다.
"""

import random
from dataclasses import replace

import pytest

from zkp.spartan.circuits import mini_circuit
from zkp.spartan.errors import MalformedProof, ParameterMismatch
from zkp.spartan.field import FR, G1, ec_add
from zkp.spartan.memory import compute_timestamps
from zkp.spartan import snark
from zkp.spartan.spark import DEREFS_BLOCKS, OPS_BLOCKS


A_VALUE = 3
C_VALUE = 15


class TestEncode:
    def test_sizes(self, snark_bundle):
        enc, commit = snark_bundle["enc"], snark_bundle["encode_commit"]
        assert (commit.n, commit.m) == (8, 32)
        assert len(enc.ops_values) == OPS_BLOCKS * commit.n
        assert len(enc.mem_values) == 2 * commit.m
        params = snark_bundle["params"].r1cs_eval_params
        assert len(commit.ops_commit) == params.ops_params.num_rows
        assert len(commit.mem_commit) == params.mem_params.num_rows
        assert params.derefs_params.num_vars == 3 + 3
        assert DEREFS_BLOCKS * commit.n == 1 << params.derefs_params.num_vars

    def test_deterministic(self, snark_bundle):
        """인코딩 커밋먼트는 블라인딩이 0이므로 다시 만들어도 같다."""
        _, again = snark.encode(snark_bundle["params"], snark_bundle["instance"])
        assert again == snark_bundle["encode_commit"]

    def test_timestamps_match_memory_model(self, snark_bundle):
        enc = snark_bundle["enc"]
        read_ts, audit_ts = compute_timestamps(enc.row_addr, enc.m)
        assert [list(ts) for ts in enc.row_read_ts] == read_ts
        assert list(enc.row_audit_ts) == audit_ts


class TestSNARKCompleteness:
    def test_verifies_with_output(self, snark_bundle):
        b = snark_bundle
        assert snark.snark_verify(b["params"], b["instance"], [C_VALUE], b["proof"], b["encode_commit"])

    def test_matrix_evals_match_mle(self, snark_bundle):
        from zkp.spartan.polynomial import evaluate_mle
        from zkp.spartan.prover import r1cs_satisfied_prove
        from zkp.spartan.transcript import Transcript
        from zkp.spartan.spark import absorb_encode_commit
        from zkp.spartan.circuits import multiply_circuit

        b = snark_bundle
        cs = multiply_circuit(A_VALUE, 5)
        transcript = Transcript(snark.TRANSCRIPT_LABEL_SNARK)
        absorb_encode_commit(transcript, b["encode_commit"])
        _, rx, ry, evals = r1cs_satisfied_prove(
            b["params"].r1cs_satisfied_params, b["instance"], cs.assignment(), transcript, random.Random(5)
        )
        assert evals == tuple(evaluate_mle(m, rx, ry) for m in b["instance"].matrices)

    def test_mini_circuit(self):
        cs = mini_circuit(3, 4)
        instance, assignment = cs.to_instance(), cs.assignment()
        params = snark.generate_parameters(instance)
        enc, commit = snark.encode(params, instance)
        proof = snark.create_proof(params, instance, assignment, enc, rng=random.Random(6))
        assert snark.snark_verify(params, instance, [18], proof, commit)
        assert not snark.snark_verify(params, instance, [17], proof, commit)


class TestSNARKSoundness:
    def test_rejects_wrong_public_input(self, snark_bundle):
        b = snark_bundle
        assert not snark.snark_verify(b["params"], b["instance"], [A_VALUE], b["proof"], b["encode_commit"])

    def test_rejects_tampered_matrix_eval(self, snark_bundle):
        b = snark_bundle
        evals = b["proof"].matrix_evals
        forged = replace(b["proof"], matrix_evals=(evals[0] + FR(1),) + evals[1:])
        assert not snark.snark_verify(b["params"], b["instance"], [C_VALUE], forged, b["encode_commit"])

    def test_rejects_other_index(self, snark_bundle):
        """인덱스 커밋먼트의 한 행이 달라지면 희소 평가 증명이 맞지 않는다."""
        b = snark_bundle
        ops = b["encode_commit"].ops_commit
        forged_commit = replace(b["encode_commit"], ops_commit=(ec_add(ops[0], G1),) + ops[1:])
        assert not snark.snark_verify(b["params"], b["instance"], [C_VALUE], b["proof"], forged_commit)


def _with_evals_proof(proof, **changes):
    return replace(proof, r1cs_evals_proof=replace(proof.r1cs_evals_proof, **changes))


class TestSNARKMemoryChecking:
    def test_rejects_tampered_read_timestamp(self, snark_bundle):
        b = snark_bundle
        hash_layer = b["proof"].r1cs_evals_proof.hash_layer_proof
        evals_row = hash_layer.evals_row
        read_ts = (evals_row.read_ts[0] + FR(1),) + evals_row.read_ts[1:]
        forged = _with_evals_proof(
            b["proof"],
            hash_layer_proof=replace(hash_layer, evals_row=replace(evals_row, read_ts=read_ts)),
        )
        assert not snark.snark_verify(b["params"], b["instance"], [C_VALUE], forged, b["encode_commit"])

    def test_rejects_scaled_read_write_claims(self, snark_bundle):
        """read와 write를 같은 배수로 바꾸면 멀티셋 항등식은 유지되지만 증명은 거부된다."""
        b = snark_bundle
        prod_layer = b["proof"].r1cs_evals_proof.prod_layer_proof
        row = prod_layer.eval_row
        factor = FR(7)
        scaled = replace(
            row,
            read=(row.read[0] * factor,) + tuple(row.read[1:]),
            write=(row.write[0] * factor,) + tuple(row.write[1:]),
        )
        assert scaled.init * scaled.write[0] * scaled.write[1] * scaled.write[2] == (
            scaled.read[0] * scaled.read[1] * scaled.read[2] * scaled.audit
        )
        forged = _with_evals_proof(
            b["proof"], prod_layer_proof=replace(prod_layer, eval_row=scaled)
        )
        assert not snark.snark_verify(b["params"], b["instance"], [C_VALUE], forged, b["encode_commit"])


class TestSNARKErrors:
    def test_index_size_mismatch(self, snark_bundle):
        b = snark_bundle
        forged_commit = replace(b["encode_commit"], m=64)
        with pytest.raises(ParameterMismatch):
            snark.snark_verify(b["params"], b["instance"], [C_VALUE], b["proof"], forged_commit)

    @pytest.mark.parametrize("name", ["ops_params", "mem_params", "derefs_params"])
    def test_undersized_generators(self, snark_bundle, name):
        b = snark_bundle
        evals_params = b["params"].r1cs_eval_params
        pc = getattr(evals_params, name)
        gen_n = replace(pc.gen_n, generators=pc.gen_n.generators[:-1])
        small = replace(
            b["params"], r1cs_eval_params=replace(evals_params, **{name: replace(pc, gen_n=gen_n)})
        )
        with pytest.raises(ParameterMismatch):
            snark.snark_verify(small, b["instance"], [C_VALUE], b["proof"], b["encode_commit"])

    def test_matrix_eval_count(self, snark_bundle):
        b = snark_bundle
        forged = replace(b["proof"], matrix_evals=b["proof"].matrix_evals[:2])
        with pytest.raises(MalformedProof):
            snark.snark_verify(b["params"], b["instance"], [C_VALUE], forged, b["encode_commit"])

    def test_wrong_input_count(self, snark_bundle):
        b = snark_bundle
        with pytest.raises(MalformedProof):
            snark.snark_verify(b["params"], b["instance"], [C_VALUE, 1], b["proof"], b["encode_commit"])

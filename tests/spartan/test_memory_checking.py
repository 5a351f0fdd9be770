"""
곱 회로 논증과 오프라인 메모리 검사 테스트
============================================

  - 곱 회로: 잎 8개, 정상 증명은 통과하고 주장 하나만 바꿔도 거부
  - 메모리 검사: 정상 접근 기록은 init·write == read·audit 을 만족하고
    잘못된 읽기 하나가 섞이면 항등식이 깨진다
"""

import random

import pytest

from zkp.spartan.errors import CryptographicCheckFailed, MalformedProof, require
from zkp.spartan.field import FR, random_fr
from zkp.spartan.memory import (
    check_multiset_identity,
    compute_timestamps,
    hash_tuple,
    init_addr_eval,
    memory_leaves,
    multiset_claims,
)
from zkp.spartan.polynomial import evaluate_value
from zkp.spartan.product_circuit import (
    DotProductCircuit,
    ProductCircuit,
    product_circuit_eval_prove,
    product_circuit_eval_verify,
)
from zkp.spartan.proof import LayerProof, ProductCircuitEvalProof
from zkp.spartan.transcript import Transcript


LEAVES = [FR(v) for v in (2, 3, 5, 7, 11, 13, 17, 19)]


# =====================================================================
# 곱 회로
# =====================================================================

class TestProductCircuit:
    def test_root_is_product(self):
        circuit = ProductCircuit(LEAVES)
        assert circuit.evaluate() == FR(2 * 3 * 5 * 7 * 11 * 13 * 17 * 19)
        assert circuit.num_layers == 3

    def test_first_layer_pairs_halves(self):
        """out[i] = in[i] · in[i + n/2]."""
        circuit = ProductCircuit(LEAVES)
        assert circuit.left_vec[0] == LEAVES[:4]
        assert circuit.right_vec[0] == LEAVES[4:]

    def test_dot_product_circuit(self):
        dotp = DotProductCircuit([FR(1), FR(2)], [FR(3), FR(4)], [FR(5), FR(6)])
        assert dotp.evaluate() == FR(1 * 3 * 5 + 2 * 4 * 6)

    def test_dot_product_length_mismatch(self):
        with pytest.raises(ValueError):
            DotProductCircuit([FR(1)], [FR(1), FR(2)], [FR(1)])


class TestProductCircuitArgument:
    @pytest.fixture(scope="class")
    def proved(self):
        circuit = ProductCircuit(LEAVES)
        proof, claims, _, rands = product_circuit_eval_prove([circuit], [], Transcript(b"test"))
        return circuit, proof, claims, rands

    def test_accepts(self, proved):
        circuit, proof, claims, rands = proved
        claims_v, _, rands_v = product_circuit_eval_verify(
            proof, [circuit.evaluate()], [], 8, Transcript(b"test")
        )
        assert rands_v == rands
        assert claims_v == claims
        # 마지막 주장은 잎 벡터의 다중선형 확장 값
        assert claims_v[0] == evaluate_value(LEAVES, rands_v)

    def test_rejects_altered_root_claim(self, proved):
        circuit, proof, _, _ = proved
        with pytest.raises(CryptographicCheckFailed):
            product_circuit_eval_verify(proof, [circuit.evaluate() + FR(1)], [], 8, Transcript(b"test"))

    @pytest.mark.parametrize("layer", [0, 1, 2])
    def test_rejects_altered_layer_claim(self, proved, layer):
        circuit, proof, _, _ = proved
        layers = list(proof.layers_proof)
        target = layers[layer]
        layers[layer] = LayerProof(
            polys=target.polys,
            claim_prod_left=(target.claim_prod_left[0] + FR(1),),
            claim_prod_right=target.claim_prod_right,
        )
        forged = ProductCircuitEvalProof(layers_proof=tuple(layers))
        with pytest.raises(CryptographicCheckFailed):
            product_circuit_eval_verify(forged, [circuit.evaluate()], [], 8, Transcript(b"test"))

    def test_rejects_altered_leaf_opening(self, proved):
        """잎 하나를 바꾸면 최종 주장과 잎 평가의 대조에서 거부된다."""
        circuit, proof, _, _ = proved
        claims_v, _, rands_v = product_circuit_eval_verify(
            proof, [circuit.evaluate()], [], 8, Transcript(b"test")
        )
        altered = list(LEAVES)
        altered[5] = altered[5] + FR(1)
        with pytest.raises(CryptographicCheckFailed):
            require(claims_v[0] == evaluate_value(altered, rands_v), "leaf-opening")

    def test_rejects_proof_over_altered_leaves(self):
        """바뀐 잎으로 만든 증명은 원래 곱 주장으로 검증되지 않는다."""
        altered = list(LEAVES)
        altered[2] = altered[2] + FR(1)
        proof, _, _, _ = product_circuit_eval_prove([ProductCircuit(altered)], [], Transcript(b"test"))
        with pytest.raises(CryptographicCheckFailed):
            product_circuit_eval_verify(
                proof, [ProductCircuit(LEAVES).evaluate()], [], 8, Transcript(b"test")
            )

    def test_rejects_wrong_layer_count(self, proved):
        circuit, proof, _, _ = proved
        with pytest.raises(MalformedProof):
            product_circuit_eval_verify(proof, [circuit.evaluate()], [], 16, Transcript(b"test"))

    def test_batched_with_dot_product(self):
        rng = random.Random(11)
        circuits = [ProductCircuit([random_fr(rng) for _ in range(4)]) for _ in range(2)]
        dotp = [
            DotProductCircuit(*([random_fr(rng) for _ in range(2)] for _ in range(3)))
            for _ in range(2)
        ]
        proof, claims, claims_dotp, rands = product_circuit_eval_prove(circuits, dotp, Transcript(b"test"))
        claims_v, claims_dotp_v, rands_v = product_circuit_eval_verify(
            proof, [c.evaluate() for c in circuits], [d.evaluate() for d in dotp], 4, Transcript(b"test")
        )
        assert (claims_v, claims_dotp_v, rands_v) == (claims, claims_dotp, rands)
        assert len(claims_dotp_v) == 3


# =====================================================================
# 오프라인 메모리 검사
# =====================================================================

class TestTimestamps:
    def test_shared_memory_across_sequences(self):
        read_ts, audit_ts = compute_timestamps([[0, 1, 0], [1, 1]], 4)
        assert read_ts == [[0, 0, 1], [1, 2]]
        assert audit_ts == [2, 3, 0, 0]

    def test_init_addr_eval(self):
        """주소 다항식의 불리언 점 평가는 주소 정수 자체."""
        assert init_addr_eval([FR(1), FR(0), FR(1)]) == FR(5)


class TestMultisetIdentity:
    M = 8
    N = 8

    def _trace(self, seed):
        rng = random.Random(seed)
        memory = [random_fr(rng) for _ in range(self.M)]
        addr_lists = [[rng.randrange(self.M) for _ in range(self.N)] for _ in range(3)]
        value_lists = [[memory[a] for a in addrs] for addrs in addr_lists]
        gamma = (random_fr(rng), random_fr(rng))
        return memory, addr_lists, value_lists, gamma

    def _claims(self, memory, addr_lists, value_lists, gamma):
        read_ts, audit_ts = compute_timestamps(addr_lists, self.M)
        leaves = memory_leaves(memory, addr_lists, value_lists, read_ts, audit_ts, gamma)
        return multiset_claims(leaves)

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_well_formed_trace_holds(self, seed):
        claims = self._claims(*self._trace(seed))
        check_multiset_identity(claims)

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_inconsistent_read_rejected(self, seed):
        memory, addr_lists, value_lists, gamma = self._trace(seed)
        value_lists[1][3] = value_lists[1][3] + FR(1)
        claims = self._claims(memory, addr_lists, value_lists, gamma)
        with pytest.raises(CryptographicCheckFailed) as err:
            check_multiset_identity(claims, check="row-memory-multiset")
        assert err.value.check == "row-memory-multiset"

    def test_hash_tuple_binds_fields(self):
        gamma = (FR(1234567), FR(7654321))
        base = hash_tuple(FR(1), FR(2), FR(3), gamma)
        assert base != hash_tuple(FR(2), FR(2), FR(3), gamma)
        assert base != hash_tuple(FR(1), FR(3), FR(3), gamma)
        assert base != hash_tuple(FR(1), FR(2), FR(4), gamma)

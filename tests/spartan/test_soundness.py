"""
증명 바이트 변조 테스트
=========================

정규 바이트로 인코딩한 증명에서 임의 위치의 비트 하나를 뒤집으면
역직렬화가 MalformedProof로 거부하거나, 복원된 증명이 검증에 실패해야 한다.
어떤 경우에도 True가 나오거나 다른 예외가 새어 나와서는 안 된다.
"""

import random

import pytest

from zkp.spartan.errors import MalformedProof
from zkp.spartan import nizk, snark
from spartan_serializers import (
    nizk_proof_from_bytes,
    nizk_proof_to_bytes,
    snark_proof_from_bytes,
    snark_proof_to_bytes,
)


C_VALUE = 15


def _flip(blob, pos):
    altered = bytearray(blob)
    altered[pos] ^= 0x01
    return bytes(altered)


def _positions(blob, k):
    return random.Random(2024).sample(range(len(blob)), k)


def _outcome(decode, verify, blob):
    """변조된 바이트열의 처리 결과: "malformed" 또는 검증 결과 bool."""
    try:
        proof = decode(blob)
    except MalformedProof:
        return "malformed"
    try:
        return verify(proof)
    except MalformedProof:
        return "malformed"


class TestNIZKByteFlips:
    @pytest.fixture(scope="class")
    def blob(self, nizk_bundle):
        return nizk_proof_to_bytes(nizk_bundle["proof"])

    def test_untouched_blob_verifies(self, nizk_bundle, blob):
        proof = nizk_proof_from_bytes(blob)
        assert nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], proof)

    @pytest.mark.parametrize("index", range(4))
    def test_flip_rejected(self, nizk_bundle, blob, index):
        pos = _positions(blob, 4)[index]

        def verify(proof):
            return nizk.nizk_verify(nizk_bundle["params"], nizk_bundle["instance"], [C_VALUE], proof)

        assert _outcome(nizk_proof_from_bytes, verify, _flip(blob, pos)) in ("malformed", False)

    def test_trailing_byte_rejected(self, blob):
        with pytest.raises(MalformedProof):
            nizk_proof_from_bytes(blob + b" ")


class TestSNARKByteFlips:
    @pytest.fixture(scope="class")
    def blob(self, snark_bundle):
        return snark_proof_to_bytes(snark_bundle["proof"])

    @pytest.mark.parametrize("index", range(3))
    def test_flip_rejected(self, snark_bundle, blob, index):
        pos = _positions(blob, 3)[index]
        b = snark_bundle

        def verify(proof):
            return snark.snark_verify(b["params"], b["instance"], [C_VALUE], proof, b["encode_commit"])

        assert _outcome(snark_proof_from_bytes, verify, _flip(blob, pos)) in ("malformed", False)

    def test_truncated_rejected(self, blob):
        with pytest.raises(MalformedProof):
            snark_proof_from_bytes(blob[:-1])

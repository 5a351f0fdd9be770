import sys
import os
import random

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.spartan.circuits import multiply_circuit
from zkp.spartan import nizk, snark


# ── 테스트 상수 ──
A_VALUE = 3
B_VALUE = 5
C_VALUE = A_VALUE * B_VALUE


@pytest.fixture
def rng():
    """재현 가능한 블라인딩용 난수 생성기."""
    return random.Random(7)


@pytest.fixture(scope="session")
def squat_circuit():
    """a·b = c, 제약 6개 / 변수 11개 회로의 (instance, assignment)."""
    cs = multiply_circuit(A_VALUE, B_VALUE, num_constraints=6, num_variables=11)
    return cs.to_instance(), cs.assignment()


@pytest.fixture(scope="session")
def nizk_bundle(squat_circuit):
    """NIZK 파라미터와 증명."""
    instance, assignment = squat_circuit
    params = nizk.generate_parameters(instance)
    proof = nizk.create_proof(params, instance, assignment, rng=random.Random(1))
    return {"instance": instance, "params": params, "proof": proof}


@pytest.fixture(scope="session")
def snark_bundle(squat_circuit):
    """SNARK 파라미터, 인덱스, 증명."""
    instance, assignment = squat_circuit
    params = snark.generate_parameters(instance)
    enc, encode_commit = snark.encode(params, instance)
    proof = snark.create_proof(params, instance, assignment, enc, rng=random.Random(2))
    return {
        "instance": instance,
        "params": params,
        "enc": enc,
        "encode_commit": encode_commit,
        "proof": proof,
    }

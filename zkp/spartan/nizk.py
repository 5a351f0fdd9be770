"""
Spartan NIZK
=============

행렬 평가값을 Verifier가 공개 행렬에서 직접 계산하는 변형.
Verifier 비용은 행렬의 비영 항목 수에 비례하지만 인덱싱 단계가 필요 없다.

증명에는 R1CS 만족 증명과 두 합검사의 평가 점 (rx, ry)가 들어 있다.
Verifier는 주어진 점에서 Ã, B̃, C̃ 를 계산한 뒤, 트랜스크립트로 다시 도출한
점이 증명의 점과 같을 때만 받아들인다.

사용 예시:
    >>> params = generate_parameters(instance)
    >>> proof = create_proof(params, instance, assignment)
    >>> nizk_verify(params, instance, [c], proof)   # True
    >>> nizk_verify(params, instance, [a], proof)   # False
"""

import logging

from zkp.spartan.errors import CryptographicCheckFailed, require, require_shape
from zkp.spartan.params import DEFAULT_SETUP_LABEL, R1CSSatisfiedSetupParameters
from zkp.spartan.polynomial import evaluate_mle, log2
from zkp.spartan.proof import NIZKProof
from zkp.spartan.prover import r1cs_satisfied_prove
from zkp.spartan.transcript import Transcript
from zkp.spartan.verifier import r1cs_satisfied_verify


logger = logging.getLogger(__name__)

TRANSCRIPT_LABEL_NIZK = b"Spartan NIZK proof"


def generate_parameters(instance, label=DEFAULT_SETUP_LABEL):
    params = R1CSSatisfiedSetupParameters.generate(log2(instance.num_vars), label)
    logger.info(
        f"NIZK parameters generated: {instance.num_constraints} constraints, "
        f"{instance.num_vars} witness slots"
    )
    return params


def create_proof(params, instance, assignment, rng=None):
    """NIZK 증명을 생성한다.

    Args:
        params: R1CSSatisfiedSetupParameters
        instance: R1CSInstance
        assignment: Assignment
        rng: 테스트 재현용 random.Random (None이면 secrets)
    """
    if not assignment.is_satisfied(instance):
        logger.warning("Assignment does not satisfy the instance; proof will not verify")
    transcript = Transcript(TRANSCRIPT_LABEL_NIZK)
    sat_proof, rx, ry, _ = r1cs_satisfied_prove(params, instance, assignment, transcript, rng)
    logger.info("NIZK proof created")
    return NIZKProof(r1cs_satisfied_proof=sat_proof, rx=tuple(rx), ry=tuple(ry))


def nizk_verify(params, instance, public_inputs, proof):
    """NIZK 증명을 검증한다.

    Returns:
        bool: 모든 검사를 통과하면 True

    Raises:
        MalformedProof: 증명 구조나 공개 입력 개수가 잘못되었을 때
        ParameterMismatch: 파라미터가 인스턴스와 맞지 않을 때
    """
    require_shape(
        len(proof.rx) == instance.num_rounds_x and len(proof.ry) == instance.num_rounds_y,
        "평가 점 길이가 인스턴스 크기와 맞지 않습니다",
    )
    transcript = Transcript(TRANSCRIPT_LABEL_NIZK)
    matrix_evals = tuple(evaluate_mle(m, proof.rx, proof.ry) for m in instance.matrices)
    try:
        rx, ry = r1cs_satisfied_verify(
            params, instance, public_inputs, proof.r1cs_satisfied_proof, matrix_evals, transcript
        )
        require(
            list(rx) == list(proof.rx) and list(ry) == list(proof.ry),
            "evaluation-point",
        )
    except CryptographicCheckFailed as err:
        logger.debug(f"NIZK check failed: {err.check}")
        logger.info("NIZK proof rejected")
        return False
    logger.info("NIZK proof verified")
    return True

"""
Spartan SNARK
==============

NIZK에 희소 행렬 평가 논증을 더한 변형. 인덱싱 단계에서 R1CS 행렬을
한 번 커밋해 두면(EncodeCommit), Verifier는 행렬 평가값을 스스로 계산하지
않고 증명으로 확인한다.

    setup  → generate_parameters(instance)
    index  → encode(params, instance)          # (Encode, EncodeCommit)
    prove  → create_proof(params, instance, assignment, enc)
    verify → snark_verify(params, instance, inputs, proof, encode_commit)

트랜스크립트 순서:
    인덱스 커밋먼트 → R1CS 만족 증명 → Ar/Br/Cr 주장 → 희소 평가 증명
"""

import logging

from zkp.spartan.errors import CryptographicCheckFailed, require_params, require_shape
from zkp.spartan.params import (
    DEFAULT_SETUP_LABEL,
    R1CSEvalsSetupParameters,
    R1CSSatisfiedSetupParameters,
    SetupParametersWithSpark,
)
from zkp.spartan.polynomial import log2
from zkp.spartan.proof import SNARKProof
from zkp.spartan.prover import r1cs_satisfied_prove
from zkp.spartan import spark
from zkp.spartan.transcript import Transcript
from zkp.spartan.verifier import r1cs_satisfied_verify


logger = logging.getLogger(__name__)

TRANSCRIPT_LABEL_SNARK = b"Spartan SNARK proof"


def generate_parameters(instance, label=DEFAULT_SETUP_LABEL):
    params = SetupParametersWithSpark(
        r1cs_satisfied_params=R1CSSatisfiedSetupParameters.generate(
            log2(instance.num_vars), label
        ),
        r1cs_eval_params=R1CSEvalsSetupParameters.generate(
            log2(instance.num_nz_entries), log2(instance.num_cells), label
        ),
    )
    logger.info(
        f"SNARK parameters generated: n={instance.num_nz_entries}, m={instance.num_cells}"
    )
    return params


def encode(params, instance):
    """R1CS 행렬을 인덱싱한다.

    Returns:
        (Encode, EncodeCommit): Prover용 인코딩과 Verifier용 커밋먼트
    """
    enc, commit = spark.encode(params.r1cs_eval_params, instance)
    logger.info(f"R1CS matrices encoded: {len(commit.ops_commit)} ops rows")
    return enc, commit


def _absorb_claims(transcript, matrix_evals):
    eval_a, eval_b, eval_c = matrix_evals
    transcript.append_scalar(b"Ar_claim", eval_a)
    transcript.append_scalar(b"Br_claim", eval_b)
    transcript.append_scalar(b"Cr_claim", eval_c)


def create_proof(params, instance, assignment, enc, rng=None):
    if not assignment.is_satisfied(instance):
        logger.warning("Assignment does not satisfy the instance; proof will not verify")
    transcript = Transcript(TRANSCRIPT_LABEL_SNARK)
    spark.absorb_encode_commit(transcript, enc.commit)

    sat_proof, rx, ry, matrix_evals = r1cs_satisfied_prove(
        params.r1cs_satisfied_params, instance, assignment, transcript, rng
    )
    _absorb_claims(transcript, matrix_evals)
    evals_proof = spark.sparse_poly_eval_prove(
        params.r1cs_eval_params, enc, rx, ry, transcript, rng
    )
    logger.info("SNARK proof created")
    return SNARKProof(
        r1cs_satisfied_proof=sat_proof,
        matrix_evals=matrix_evals,
        r1cs_evals_proof=evals_proof,
    )


def snark_verify(params, instance, public_inputs, proof, encode_commit):
    """SNARK 증명을 검증한다.

    Returns:
        bool: 모든 검사를 통과하면 True

    Raises:
        MalformedProof: 증명 구조나 공개 입력 개수가 잘못되었을 때
        ParameterMismatch: 파라미터나 인덱스가 인스턴스와 맞지 않을 때
    """
    require_params(
        encode_commit.n == instance.num_nz_entries and encode_commit.m == instance.num_cells,
        "인덱스 커밋먼트 크기가 인스턴스와 맞지 않습니다",
    )
    spark.check_eval_params(params.r1cs_eval_params, encode_commit.n, encode_commit.m)
    require_shape(len(proof.matrix_evals) == 3, "행렬 평가값은 3개여야 합니다")

    transcript = Transcript(TRANSCRIPT_LABEL_SNARK)
    spark.absorb_encode_commit(transcript, encode_commit)
    try:
        rx, ry = r1cs_satisfied_verify(
            params.r1cs_satisfied_params, instance, public_inputs,
            proof.r1cs_satisfied_proof, proof.matrix_evals, transcript,
        )
        _absorb_claims(transcript, proof.matrix_evals)
        spark.sparse_poly_eval_verify(
            params.r1cs_eval_params, proof.r1cs_evals_proof, encode_commit,
            rx, ry, proof.matrix_evals, transcript,
        )
    except CryptographicCheckFailed as err:
        logger.debug(f"SNARK check failed: {err.check}")
        logger.info("SNARK proof rejected")
        return False
    logger.info("SNARK proof verified")
    return True

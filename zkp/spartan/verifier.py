"""
R1CS 만족 검증 (r1cs_satisfied_verify)
========================================

Spartan 검증의 핵심. Prover가 증인 w를 커밋했고 z = (w, 1, io) 가

    (A·z) ∘ (B·z) = (C·z)

를 만족함을 두 번의 합검사로 확인한다.

  1단계: 임의의 제약 점 τ에 대해 Σ_x eq(τ, x)·(Az·Bz − Cz)(x) = 0
         → 점 rx 와 Az(rx), Bz(rx), Cz(rx) 커밋먼트
  2단계: r_a·Az(rx) + r_b·Bz(rx) + r_c·Cz(rx) = Σ_y M(rx, y)·z(y)
         → 점 ry 와 z̃(ry) 한 점 평가
  마지막으로 증인 커밋먼트를 ry[1:] 에서 열고, 행렬 평가값
  Ã(rx, ry), B̃(rx, ry), C̃(rx, ry) 로 두 번째 주장을 닫는다.

행렬 평가값은 호출자가 공급한다. NIZK는 공개 행렬에서 직접 계산하고,
SNARK는 희소 평가 논증으로 따로 증명한다.

모든 검사는 실패 즉시 CryptographicCheckFailed를 발생시키며 (fail fast),
최상위 nizk_verify / snark_verify가 이를 False로 바꾼다.
"""

import logging

from zkp.spartan.commitments import commit_with
from zkp.spartan.errors import require_params, require_shape
from zkp.spartan.field import FR, ec_add, ec_mul, ec_sub
from zkp.spartan.inner_product import inner_product_verify
from zkp.spartan.params import check_poly_commit_params
from zkp.spartan.polynomial import eval_eq_x_y, evaluate_value, log2
from zkp.spartan.sigma import eq_verify, knowledge_verify, product_verify
from zkp.spartan.sumcheck import PHASE_ONE_SIZE, PHASE_TWO_SIZE, sum_check_verify


logger = logging.getLogger(__name__)


def check_satisfied_params(params, instance):
    """설정 파라미터가 인스턴스 크기와 맞는지 확인한다.

    Raises:
        ParameterMismatch
    """
    sc, pc = params.sc_params, params.pc_params
    require_params(
        pc.num_vars == log2(instance.num_vars),
        f"다항식 커밋먼트 변수 수 {pc.num_vars} != log₂ t = {log2(instance.num_vars)}",
    )
    check_poly_commit_params(pc, "pc_params")
    require_params(sc.gen_1.size == 1, "gen_1 크기는 1이어야 합니다")
    require_params(sc.gen_1 == pc.gen_1, "합검사와 다항식 커밋먼트의 gen_1이 다릅니다")
    require_params(sc.gen_3.size == PHASE_TWO_SIZE, f"gen_3 크기는 {PHASE_TWO_SIZE}이어야 합니다")
    require_params(sc.gen_4.size == PHASE_ONE_SIZE, f"gen_4 크기는 {PHASE_ONE_SIZE}이어야 합니다")


def r1cs_satisfied_verify(params, instance, inputs, proof, matrix_evals, transcript):
    """R1CS 만족 증명을 검증한다.

    Args:
        params: R1CSSatisfiedSetupParameters
        instance: R1CSInstance
        inputs: 공개 입력 (상수 1 제외)
        proof: R1CSSatProof
        matrix_evals: (Ã(rx, ry), B̃(rx, ry), C̃(rx, ry))
        transcript: 새 Transcript

    Returns:
        (rx, ry): 두 합검사가 도출한 평가 점

    Raises:
        MalformedProof, ParameterMismatch, CryptographicCheckFailed
    """
    check_satisfied_params(params, instance)
    require_shape(
        len(inputs) == instance.num_inputs,
        f"공개 입력 {len(inputs)}개, 인스턴스는 {instance.num_inputs}개",
    )
    require_shape(len(matrix_evals) == 3, "행렬 평가값은 3개여야 합니다")
    sc, pc = params.sc_params, params.pc_params
    gen_1 = sc.gen_1
    kp_commit = proof.knowledge_product_commit

    transcript.append_scalars(b"public_inputs", [FR(v) for v in inputs])
    transcript.append_points(b"poly_commitment", proof.commit_witness)

    # ── 1단계 합검사 ──
    num_rounds_x, num_rounds_y = instance.num_rounds_x, instance.num_rounds_y
    tau = transcript.challenge_vector(b"challenge_tau", num_rounds_x)
    commit_claim = commit_with(gen_1, [FR(0)], FR(0))
    rx, commit_eval_x = sum_check_verify(
        gen_1, sc.gen_4, proof.proof_one, commit_claim, PHASE_ONE_SIZE, num_rounds_x, transcript
    )

    knowledge_verify(
        gen_1, proof.knowledge_product_proof.knowledge_proof, kp_commit.vc_commit, transcript
    )
    product_verify(
        gen_1, proof.knowledge_product_proof.product_proof,
        kp_commit.va_commit, kp_commit.vb_commit, kp_commit.prod_commit, transcript,
    )

    transcript.append_point(b"comm_Az_claim", kp_commit.va_commit)
    transcript.append_point(b"comm_Bz_claim", kp_commit.vb_commit)
    transcript.append_point(b"comm_Cz_claim", kp_commit.vc_commit)
    transcript.append_point(b"comm_prod_Az_Bz_claims", kp_commit.prod_commit)

    eq_rx_tau = eval_eq_x_y(rx, tau)
    claim_commit_one = ec_mul(ec_sub(kp_commit.prod_commit, kp_commit.vc_commit), eq_rx_tau)
    eq_verify(gen_1, claim_commit_one, commit_eval_x, proof.sc1_eq_proof, transcript)

    # ── 2단계 합검사 ──
    r_a = transcript.challenge_scalar(b"challenge_Az")
    r_b = transcript.challenge_scalar(b"challenge_Bz")
    r_c = transcript.challenge_scalar(b"challenge_Cz")
    claim_commit_two = ec_add(
        ec_add(ec_mul(kp_commit.va_commit, r_a), ec_mul(kp_commit.vb_commit, r_b)),
        ec_mul(kp_commit.vc_commit, r_c),
    )
    ry, commit_eval_y = sum_check_verify(
        gen_1, sc.gen_3, proof.proof_two, claim_commit_two, PHASE_TWO_SIZE, num_rounds_y, transcript
    )

    inner_product_verify(
        pc, ry[1:], proof.commit_witness, proof.commit_ry, proof.product_proof, transcript
    )

    eval_io = evaluate_value(instance.input_vector(inputs), ry[1:])
    commit_input = commit_with(pc.gen_1, [eval_io], FR(0))
    commit_eval_z = ec_add(ec_mul(proof.commit_ry, FR(1) - ry[0]), ec_mul(commit_input, ry[0]))

    eval_a, eval_b, eval_c = matrix_evals
    claim_commit_phase_two = ec_mul(commit_eval_z, r_a * eval_a + r_b * eval_b + r_c * eval_c)
    eq_verify(pc.gen_1, claim_commit_phase_two, commit_eval_y, proof.sc2_eq_proof, transcript)

    return rx, ry

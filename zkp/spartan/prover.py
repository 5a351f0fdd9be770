"""
R1CS 만족 증명 생성 (Prover)
==============================

Verifier의 트랜스크립트 단계를 바이트 단위로 그대로 따라간다.

── Step 1: 공개 입력과 증인 커밋먼트 흡수 ──
── Step 2: τ 도출, 1단계 합검사 ──
    Σ_x eq(τ, x) · (Az(x)·Bz(x) − Cz(x)) = 0
    라운드 다항식은 3차 (계수 4개)
── Step 3: Az(rx), Bz(rx), Cz(rx) 커밋 + 지식/곱 증명 ──
── Step 4: 1단계 최종값과 (prod − vc)·eq(rx, τ) 의 동등성 증명 ──
── Step 5: r_a, r_b, r_c 도출, 2단계 합검사 ──
    Σ_y (r_a·A(rx, y) + r_b·B(rx, y) + r_c·C(rx, y)) · z(y)
    라운드 다항식은 2차 (계수 3개)
── Step 6: 증인 다항식을 ry[1:] 에서 여는 내적 증명 ──
── Step 7: 2단계 최종값과 z̃(ry)·(r_a·Ã + r_b·B̃ + r_c·C̃) 의 동등성 증명 ──
"""

import logging

from zkp.spartan.commitments import commit_with, poly_commit
from zkp.spartan.field import FR, ec_add, ec_mul, ec_sub, random_fr
from zkp.spartan.inner_product import inner_product_prove
from zkp.spartan.polynomial import (
    UniPoly,
    bound_poly_var_top,
    eval_eq,
    eval_eq_x_y,
    evaluate_mle,
    evaluate_value,
)
from zkp.spartan.proof import (
    KnowledgeProductCommit,
    KnowledgeProductProof,
    R1CSSatProof,
)
from zkp.spartan.sigma import eq_prove, knowledge_prove, product_prove
from zkp.spartan.sumcheck import PHASE_ONE_SIZE, PHASE_TWO_SIZE, sum_check_prove
from zkp.spartan.verifier import check_satisfied_params


logger = logging.getLogger(__name__)


class _PhaseOneState:
    """eq(τ, x)·(Az(x)·Bz(x) − Cz(x)) 의 라운드 상태."""

    def __init__(self, eq_tau, az, bz, cz):
        self.vecs = [eq_tau, az, bz, cz]

    def round_poly(self):
        evals = [FR(0)] * PHASE_ONE_SIZE
        half = len(self.vecs[0]) // 2
        for j in range(half):
            lows = [v[j] for v in self.vecs]
            deltas = [v[j + half] - v[j] for v in self.vecs]
            for x in range(PHASE_ONE_SIZE):
                e, a, b, c = (lo + d * x for lo, d in zip(lows, deltas))
                evals[x] = evals[x] + e * (a * b - c)
        return UniPoly.from_evals(evals)

    def bind(self, r):
        self.vecs = [bound_poly_var_top(v, r) for v in self.vecs]

    def final_values(self):
        _, az, bz, cz = self.vecs
        return az[0], bz[0], cz[0]


class _PhaseTwoState:
    """(r_a·A + r_b·B + r_c·C)(rx, y) · z(y) 의 라운드 상태."""

    def __init__(self, abc, z):
        self.vecs = [abc, z]

    def round_poly(self):
        evals = [FR(0)] * PHASE_TWO_SIZE
        half = len(self.vecs[0]) // 2
        abc, z = self.vecs
        for j in range(half):
            d_abc = abc[j + half] - abc[j]
            d_z = z[j + half] - z[j]
            for x in range(PHASE_TWO_SIZE):
                evals[x] = evals[x] + (abc[j] + d_abc * x) * (z[j] + d_z * x)
        return UniPoly.from_evals(evals)

    def bind(self, r):
        self.vecs = [bound_poly_var_top(v, r) for v in self.vecs]


def _bind_rows(instance, eq_rx, weights):
    """Σ_k weight_k · M_k(rx, y) 를 y 에 대한 벡터(길이 2t)로 계산한다."""
    out = [FR(0)] * (2 * instance.num_vars)
    for matrix, weight in zip(instance.matrices, weights):
        for row, col, val in matrix:
            out[col] = out[col] + weight * val * eq_rx[row]
    return out


def r1cs_satisfied_prove(params, instance, assignment, transcript, rng=None):
    """R1CS 만족 증명을 생성한다.

    Args:
        params: R1CSSatisfiedSetupParameters
        instance: R1CSInstance
        assignment: 만족하는 Assignment
        transcript: Verifier와 같은 레이블로 만든 새 Transcript
        rng: 테스트 재현용 random.Random

    Returns:
        (R1CSSatProof, rx, ry, (Ã(rx, ry), B̃(rx, ry), C̃(rx, ry)))
    """
    check_satisfied_params(params, instance)
    sc, pc = params.sc_params, params.pc_params
    gen_1 = sc.gen_1

    # ── Step 1: 공개 입력과 증인 커밋먼트 ──
    transcript.append_scalars(b"public_inputs", [FR(v) for v in assignment.inputs])
    witness = assignment.witness_vector(instance)
    commit_witness, witness_blinds = poly_commit(pc, witness, rng=rng)
    transcript.append_points(b"poly_commitment", commit_witness)

    # ── Step 2: 1단계 합검사 ──
    tau = transcript.challenge_vector(b"challenge_tau", instance.num_rounds_x)
    z = assignment.z_vector(instance)
    az, bz, cz = instance.multiply_vec(z)
    phase_one = _PhaseOneState(eval_eq(tau), az, bz, cz)
    proof_one, rx, claim_x, blind_x = sum_check_prove(
        gen_1, sc.gen_4, instance.num_rounds_x, FR(0), FR(0), phase_one, transcript, rng
    )

    # ── Step 3: Az(rx), Bz(rx), Cz(rx) 커밋 ──
    va, vb, vc = phase_one.final_values()
    prod = va * vb
    b_a, b_b, b_c, b_prod = (random_fr(rng) for _ in range(4))
    kp_commit = KnowledgeProductCommit(
        va_commit=commit_with(gen_1, [va], b_a),
        vb_commit=commit_with(gen_1, [vb], b_b),
        vc_commit=commit_with(gen_1, [vc], b_c),
        prod_commit=commit_with(gen_1, [prod], b_prod),
    )
    knowledge_proof = knowledge_prove(gen_1, vc, b_c, transcript, rng)
    product_proof = product_prove(gen_1, va, b_a, vb, b_b, prod, b_prod, transcript, rng)

    transcript.append_point(b"comm_Az_claim", kp_commit.va_commit)
    transcript.append_point(b"comm_Bz_claim", kp_commit.vb_commit)
    transcript.append_point(b"comm_Cz_claim", kp_commit.vc_commit)
    transcript.append_point(b"comm_prod_Az_Bz_claims", kp_commit.prod_commit)

    # ── Step 4: 1단계 최종값 동등성 ──
    eq_rx_tau = eval_eq_x_y(rx, tau)
    claim_commit_one = ec_mul(ec_sub(kp_commit.prod_commit, kp_commit.vc_commit), eq_rx_tau)
    sc1_eq_proof = eq_prove(
        gen_1, claim_commit_one, (b_prod - b_c) * eq_rx_tau,
        commit_with(gen_1, [claim_x], blind_x), blind_x, transcript, rng,
    )

    # ── Step 5: 2단계 합검사 ──
    r_a = transcript.challenge_scalar(b"challenge_Az")
    r_b = transcript.challenge_scalar(b"challenge_Bz")
    r_c = transcript.challenge_scalar(b"challenge_Cz")
    abc = _bind_rows(instance, eval_eq(rx), (r_a, r_b, r_c))
    phase_two = _PhaseTwoState(abc, z)
    proof_two, ry, claim_y, blind_y = sum_check_prove(
        gen_1, sc.gen_3, instance.num_rounds_y,
        r_a * va + r_b * vb + r_c * vc, r_a * b_a + r_b * b_b + r_c * b_c,
        phase_two, transcript, rng,
    )

    # ── Step 6: 증인 평가 증명 ──
    eval_w = evaluate_value(witness, ry[1:])
    b_ry = random_fr(rng)
    commit_ry = commit_with(gen_1, [eval_w], b_ry)
    dot_product_proof = inner_product_prove(
        pc, ry[1:], witness, witness_blinds, eval_w, b_ry, transcript, rng
    )

    # ── Step 7: 2단계 최종값 동등성 ──
    eval_io = evaluate_value(instance.input_vector(assignment.inputs), ry[1:])
    commit_input = commit_with(gen_1, [eval_io], FR(0))
    commit_eval_z = ec_add(ec_mul(commit_ry, FR(1) - ry[0]), ec_mul(commit_input, ry[0]))
    matrix_evals = tuple(evaluate_mle(m, rx, ry) for m in instance.matrices)
    coeff = r_a * matrix_evals[0] + r_b * matrix_evals[1] + r_c * matrix_evals[2]
    sc2_eq_proof = eq_prove(
        gen_1, ec_mul(commit_eval_z, coeff), (FR(1) - ry[0]) * b_ry * coeff,
        commit_with(gen_1, [claim_y], blind_y), blind_y, transcript, rng,
    )

    proof = R1CSSatProof(
        commit_witness=tuple(commit_witness),
        proof_one=proof_one,
        knowledge_product_commit=kp_commit,
        knowledge_product_proof=KnowledgeProductProof(
            knowledge_proof=knowledge_proof,
            product_proof=product_proof,
        ),
        sc1_eq_proof=sc1_eq_proof,
        proof_two=proof_two,
        commit_ry=commit_ry,
        product_proof=dot_product_proof,
        sc2_eq_proof=sc2_eq_proof,
    )
    logger.debug(
        f"R1CS satisfiability proof built: {instance.num_rounds_x} + {instance.num_rounds_y} sumcheck rounds"
    )
    return proof, rx, ry, matrix_evals

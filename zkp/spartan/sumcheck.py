"""
합검사 (Sumcheck) 프로토콜
============================

    H = Σ_{b ∈ {0,1}^k} g(b)

라는 주장을 k 라운드에 걸쳐 한 점 g(r₁, ..., r_k)의 평가로 줄인다.
라운드 j에서 Prover는 첫 번째 남은 변수에 대한 단변수 다항식 g_j(X)를 보내고,
Verifier는 g_j(0) + g_j(1) == (직전 주장) 을 확인한 뒤 챌린지 r_j를 보낸다.
다음 주장은 g_j(r_j) 이다.

이 모듈에는 두 가지 변형이 있다.

**1. 영지식 합검사 (sum_check_prove / sum_check_verify)**
  R1CS 만족 증명에서 사용. 라운드 다항식과 주장 모두 Pedersen 커밋먼트로만
  전달된다. Verifier는 값을 보지 못하므로 라운드마다 평가 일관성 증명
  (sum_check_eval_verify)으로 다음 두 등식을 확인한다.

    w0·(g(0) + g(1)) + w1·g(r) == w0·claim + w1·eval

  좌변은 계수 벡터와 공개 벡터 a (a₀ = 2·w0 + w1, aᵢ = w0 + w1·rⁱ)의
  내적이므로, Schnorr 스타일 내적 증명 하나로 두 주장을 동시에 확인한다.

  라운드 다항식의 계수 개수 size는 호출 지점마다 고정된 프로토콜 상수이다.
    - 1단계 (eq·(Az·Bz − Cz)): 3차 다항식, 계수 4개, gen_4
    - 2단계 (M(rx, y)·z(y)): 2차 다항식, 계수 3개, gen_3

**2. 평문 3차 합검사 (sum_check_cubic_prove / sum_check_cubic_verify)**
  곱 회로 논증에서 사용. 라운드 다항식의 계수를 그대로 트랜스크립트에 넣는다.

라운드 순서 (영지식 합검사):
  comm_poly 흡수 → r_i 도출 → comm_claim_per_round, comm_eval 흡수 → 평가 증명
  Prover는 r_i를 안 뒤에 평가값을 커밋한다.
"""

from zkp.spartan.commitments import commit_with
from zkp.spartan.errors import require, require_shape
from zkp.spartan.field import FR, ec_add, ec_mul, inner_product, random_fr
from zkp.spartan.polynomial import UniPoly, bound_poly_var_top
from zkp.spartan.proof import SumCheckEvalProof, SumCheckProof


# 1단계 / 2단계 라운드 다항식 계수 개수
PHASE_ONE_SIZE = 4
PHASE_TWO_SIZE = 3

# 곱 회로 라운드 다항식 계수 개수
CUBIC_SIZE = 4


def _eval_coeffs(w, r, size):
    """a₀ = 2·w0 + w1, aᵢ = w0 + w1·rⁱ (i ≥ 1)."""
    coeffs = []
    rc = FR(1)
    for _ in range(size):
        coeffs.append(w[0] + w[1] * rc)
        rc = rc * r
    coeffs[0] = coeffs[0] + w[0]
    return coeffs


# ─────────────────────────────────────────────────────────────────────
# 라운드 평가 일관성 증명
# ─────────────────────────────────────────────────────────────────────

def sum_check_eval_prove(gens_1, gens_n, poly, blind_poly, claim, blind_claim,
                         eval_, blind_eval, r, transcript, rng=None):
    """commit(poly), commit(claim), commit(eval) 이 일관됨을 증명한다."""
    size = len(poly)
    w = transcript.challenge_vector(b"combine_two_claims_to_one", 2)

    commit_poly = commit_with(gens_n, poly.coeffs, blind_poly)
    commit_claim = commit_with(gens_1, [claim], blind_claim)
    commit_eval = commit_with(gens_1, [eval_], blind_eval)
    commit_claim_value = ec_add(ec_mul(commit_claim, w[0]), ec_mul(commit_eval, w[1]))
    blind_y = w[0] * blind_claim + w[1] * blind_eval

    transcript.append_point(b"Cx", commit_poly)
    transcript.append_point(b"Cy", commit_claim_value)

    a = _eval_coeffs(w, r, size)
    d = [random_fr(rng) for _ in range(size)]
    r_delta = random_fr(rng)
    r_beta = random_fr(rng)
    d_commit = commit_with(gens_n, d, r_delta)
    dot_cd_commit = commit_with(gens_1, [inner_product(a, d)], r_beta)

    transcript.append_point(b"delta", d_commit)
    transcript.append_point(b"beta", dot_cd_commit)
    c = transcript.challenge_scalar(b"c")

    return SumCheckEvalProof(
        d_commit=d_commit,
        dot_cd_commit=dot_cd_commit,
        z=tuple(c * p + di for p, di in zip(poly.coeffs, d)),
        z_delta=c * blind_poly + r_delta,
        z_beta=c * blind_y + r_beta,
    )


def sum_check_eval_verify(gens_1, gens_n, commit_poly, commit_eval, commit_claim,
                          proof, r, size, transcript):
    """라운드 하나의 두 커밋먼트 등식을 확인한다."""
    require_shape(len(proof.z) == size, f"평가 증명 z 길이 {len(proof.z)} != {size}")
    w = transcript.challenge_vector(b"combine_two_claims_to_one", 2)

    transcript.append_point(b"Cx", commit_poly)
    commit_claim_value = ec_add(ec_mul(commit_claim, w[0]), ec_mul(commit_eval, w[1]))
    transcript.append_point(b"Cy", commit_claim_value)
    transcript.append_point(b"delta", proof.d_commit)
    transcript.append_point(b"beta", proof.dot_cd_commit)
    c = transcript.challenge_scalar(b"c")

    # commit(poly)·c + commit(d) == commit(z)
    lhs = ec_add(ec_mul(commit_poly, c), proof.d_commit)
    rhs = commit_with(gens_n, list(proof.z), proof.z_delta)
    require(lhs == rhs, "sumcheck-round-poly")

    # Cy·c + commit(⟨a, d⟩) == commit(⟨a, z⟩)
    a = _eval_coeffs(w, r, size)
    lhs = ec_add(ec_mul(commit_claim_value, c), proof.dot_cd_commit)
    rhs = commit_with(gens_1, [inner_product(list(proof.z), a)], proof.z_beta)
    require(lhs == rhs, "sumcheck-round-eval")


# ─────────────────────────────────────────────────────────────────────
# 영지식 합검사
# ─────────────────────────────────────────────────────────────────────

def sum_check_prove(gens_1, gens_n, num_rounds, claim, blind_claim, state,
                    transcript, rng=None):
    """커밋된 주장에 대한 합검사를 증명한다.

    Args:
        gens_1: 주장/평가값 커밋 생성자
        gens_n: 라운드 다항식 커밋 생성자 (크기 = 계수 개수)
        num_rounds: 변수 개수
        claim, blind_claim: 초기 주장과 그 블라인딩
        state: round_poly()와 bind(r)를 제공하는 라운드 상태 객체

    Returns:
        (SumCheckProof, rs, 최종 평가값, 최종 블라인딩)
    """
    comm_polys, comm_evals, proofs, rs = [], [], [], []
    commit_claim = commit_with(gens_1, [claim], blind_claim)

    for _ in range(num_rounds):
        poly = state.round_poly()
        blind_poly = random_fr(rng)
        commit_poly = commit_with(gens_n, poly.coeffs, blind_poly)
        transcript.append_point(b"comm_poly", commit_poly)

        r_i = transcript.challenge_scalar(b"challenge_nextround")
        eval_ = poly.evaluate(r_i)
        blind_eval = random_fr(rng)
        commit_eval = commit_with(gens_1, [eval_], blind_eval)
        transcript.append_point(b"comm_claim_per_round", commit_claim)
        transcript.append_point(b"comm_eval", commit_eval)

        proofs.append(sum_check_eval_prove(
            gens_1, gens_n, poly, blind_poly, claim, blind_claim,
            eval_, blind_eval, r_i, transcript, rng,
        ))
        state.bind(r_i)

        comm_polys.append(commit_poly)
        comm_evals.append(commit_eval)
        rs.append(r_i)
        claim, blind_claim, commit_claim = eval_, blind_eval, commit_eval

    proof = SumCheckProof(
        comm_polys=tuple(comm_polys),
        comm_evals=tuple(comm_evals),
        proofs=tuple(proofs),
    )
    return proof, rs, claim, blind_claim


def sum_check_verify(gens_1, gens_n, proof, commit_claim, size, num_rounds, transcript):
    """영지식 합검사를 검증한다.

    Returns:
        (rs, 최종 평가값 커밋먼트)

    Raises:
        MalformedProof: 라운드 수가 num_rounds와 다를 때
        CryptographicCheckFailed: 어느 라운드든 평가 증명이 실패할 때
    """
    require_shape(
        len(proof.comm_polys) == num_rounds
        and len(proof.comm_evals) == num_rounds
        and len(proof.proofs) == num_rounds,
        f"합검사 라운드 수가 {num_rounds}가 아닙니다",
    )
    rs = []
    for commit_poly, commit_eval, eval_proof in zip(
        proof.comm_polys, proof.comm_evals, proof.proofs
    ):
        transcript.append_point(b"comm_poly", commit_poly)
        r_i = transcript.challenge_scalar(b"challenge_nextround")
        transcript.append_point(b"comm_claim_per_round", commit_claim)
        transcript.append_point(b"comm_eval", commit_eval)

        sum_check_eval_verify(
            gens_1, gens_n, commit_poly, commit_eval, commit_claim,
            eval_proof, r_i, size, transcript,
        )
        rs.append(r_i)
        commit_claim = commit_eval

    return rs, commit_claim


# ─────────────────────────────────────────────────────────────────────
# 평문 3차 합검사 (곱 회로용)
# ─────────────────────────────────────────────────────────────────────

def sum_check_cubic_prove(num_rounds, terms, transcript):
    """Σ_x Σ_k coeff_k · a_k(x)·b_k(x)·c_k(x) 에 대한 합검사.

    Args:
        num_rounds: 변수 개수
        terms: (coeff, [a, b, c]) 리스트. 각 벡터의 길이는 2^num_rounds.

    Returns:
        (polys, rs, terms): 마지막 terms의 벡터는 길이 1 (각 다항식의 최종 평가값)
    """
    polys, rs = [], []
    for _ in range(num_rounds):
        evals = [FR(0)] * CUBIC_SIZE
        for coeff, (a, b, c) in terms:
            half = len(a) // 2
            for j in range(half):
                a0, b0, c0 = a[j], b[j], c[j]
                da = a[j + half] - a0
                db = b[j + half] - b0
                dc = c[j + half] - c0
                for x in range(CUBIC_SIZE):
                    evals[x] = evals[x] + coeff * (a0 + da * x) * (b0 + db * x) * (c0 + dc * x)
        poly = UniPoly.from_evals(evals)
        transcript.append_scalars(b"comm_poly", poly.coeffs)
        r_j = transcript.challenge_scalar(b"challenge_nextround")

        terms = [
            (coeff, [bound_poly_var_top(v, r_j) for v in vecs])
            for coeff, vecs in terms
        ]
        polys.append(poly)
        rs.append(r_j)
    return polys, rs, terms


def sum_check_cubic_verify(polys, num_rounds, claim, transcript):
    """평문 3차 합검사 검증.

    Returns:
        (rs, 최종 주장)
    """
    require_shape(len(polys) == num_rounds, f"3차 합검사 라운드 수가 {num_rounds}가 아닙니다")
    rs = []
    for poly in polys:
        require_shape(len(poly) == CUBIC_SIZE, f"라운드 다항식 계수는 {CUBIC_SIZE}개여야 합니다")
        require(poly.eval_at_zero() + poly.eval_at_one() == claim, "cubic-sumcheck-round")
        transcript.append_scalars(b"comm_poly", poly.coeffs)
        r_j = transcript.challenge_scalar(b"challenge_nextround")
        claim = poly.evaluate(r_j)
        rs.append(r_j)
    return rs, claim

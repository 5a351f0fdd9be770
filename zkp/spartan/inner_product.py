"""
내적 증명 (Bulletproof 스타일 로그 크기 opening)
==================================================

커밋된 벡터 x와 공개 벡터 a의 내적 y = ⟨x, a⟩를 x를 드러내지 않고 증명한다.

**Bullet reduction**:
  Γ = ⟨x, G⟩ + ⟨x, a⟩·Q + blind·H 에서 시작하여 매 라운드 벡터를 반으로 접는다.

    L = ⟨x_L, G_R⟩ + ⟨x_L, a_R⟩·Q + bl_L·H
    R = ⟨x_R, G_L⟩ + ⟨x_R, a_L⟩·Q + bl_R·H
    u ← transcript
    x' = u·x_L + u⁻¹·x_R
    a' = u⁻¹·a_L + u·a_R
    G' = u⁻¹·G_L + u·G_R
    Γ' = Γ + u²·L + u⁻²·R

  log₂ n 라운드 후 길이 1의 (x̂, â, ĝ, Γ̂)가 남는다. Verifier는 G를 매 라운드
  접는 대신 s 벡터 (sᵢ = Π u_j^{±1}) 로 ĝ = ⟨s, G⟩, â = ⟨s, a⟩ 를 한 번에 계산한다.

**마지막 단계 (DotProductProofLog)**:
  Γ̂ = x̂·ĝ + x̂â·Q + r̂·H 에 대한 Schnorr 스타일 증명.

    δ = d·ĝ + r_δ·H,  β = d·Q + r_β·H
    c ← transcript
    z1 = d + c·x̂·â
    z2 = â·(c·r̂ + r_β) + r_δ

  검증: (Γ̂·c + β)·â + δ == (ĝ + Q·â)·z1 + H·z2

사용 예시:
    >>> proof = inner_product_prove(pc_params, point, values, blinds, y, y_blind, t)
    >>> inner_product_verify(pc_params, point, commits, commit_y, proof, t)
"""

from zkp.spartan.commitments import commit_with, row_combination, split_point
from zkp.spartan.errors import require, require_params, require_shape
from zkp.spartan.field import (
    FR,
    ec_add,
    ec_msm,
    ec_mul,
    inner_product,
    random_fr,
)
from zkp.spartan.polynomial import log2
from zkp.spartan.proof import BulletReductionProof, DotProductProofLog


PROTOCOL_NAME = b"polynomial evaluation proof"


# ─────────────────────────────────────────────────────────────────────
# Bullet reduction
# ─────────────────────────────────────────────────────────────────────

def bullet_inner_product_prove(Q, G, H, x, a, blind, transcript, rng=None):
    """벡터 x, a를 길이 1이 될 때까지 접는다.

    Args:
        Q: 내적 값을 담는 생성자 (gen_1의 유일한 생성자)
        G: 벡터 생성자 리스트 (gen_n)
        H: 블라인딩 생성자
        x: 비밀 벡터
        a: 공개 벡터
        blind: Γ의 블라인딩

    Returns:
        (BulletReductionProof, x̂, â, ĝ, r̂)
    """
    x, a, G = list(x), list(a), list(G)
    l_vec, r_vec = [], []
    while len(x) > 1:
        half = len(x) // 2
        x_l, x_r = x[:half], x[half:]
        a_l, a_r = a[:half], a[half:]
        g_l, g_r = G[:half], G[half:]

        c_l = inner_product(x_l, a_r)
        c_r = inner_product(x_r, a_l)
        blind_l = random_fr(rng)
        blind_r = random_fr(rng)

        L = ec_msm(g_r + [Q, H], x_l + [c_l, blind_l])
        R = ec_msm(g_l + [Q, H], x_r + [c_r, blind_r])
        transcript.append_point(b"L", L)
        transcript.append_point(b"R", R)
        l_vec.append(L)
        r_vec.append(R)

        u = transcript.challenge_scalar(b"u")
        u_inv = FR(1) / u

        x = [xl * u + xr * u_inv for xl, xr in zip(x_l, x_r)]
        a = [al * u_inv + ar * u for al, ar in zip(a_l, a_r)]
        G = [ec_msm([gl, gr], [u_inv, u]) for gl, gr in zip(g_l, g_r)]
        blind = blind + blind_l * u * u + blind_r * u_inv * u_inv

    proof = BulletReductionProof(l_vec=tuple(l_vec), r_vec=tuple(r_vec))
    return proof, x[0], a[0], G[0], blind


def bullet_inner_product_verify(G, proof, gamma, a, transcript):
    """접기 챌린지를 재현하여 (â, ĝ, Γ̂)를 계산한다.

    Raises:
        MalformedProof: L/R 개수가 log₂ n 과 다를 때
    """
    n = len(G)
    rounds = log2(n)
    require_shape(len(a) == n, f"공개 벡터 길이 {len(a)} != 생성자 수 {n}")
    require_shape(
        len(proof.l_vec) == rounds and len(proof.r_vec) == rounds,
        f"bullet reduction 라운드 수가 {rounds}가 아닙니다",
    )

    us = []
    for L, R in zip(proof.l_vec, proof.r_vec):
        transcript.append_point(b"L", L)
        transcript.append_point(b"R", R)
        us.append(transcript.challenge_scalar(b"u"))
    u_invs = [FR(1) / u for u in us]

    # sᵢ = Π_j u_j^{bit_j(i) ? 1 : -1}, 첫 라운드가 최상위 비트
    s = [FR(1)]
    for u, u_inv in zip(us, u_invs):
        nxt = []
        for v in s:
            nxt.append(v * u_inv)
            nxt.append(v * u)
        s = nxt

    a_hat = inner_product(s, a)
    g_hat = ec_msm(list(G), s)
    gamma_hat = ec_msm(
        [gamma] + list(proof.l_vec) + list(proof.r_vec),
        [FR(1)] + [u * u for u in us] + [u_inv * u_inv for u_inv in u_invs],
    )
    return a_hat, g_hat, gamma_hat


# ─────────────────────────────────────────────────────────────────────
# 다항식 평가 증명
# ─────────────────────────────────────────────────────────────────────

def inner_product_prove(params, point, values, blinds, eval_, eval_blind, transcript, rng=None):
    """커밋된 다항식이 point에서 eval_ 로 평가됨을 증명한다.

    Args:
        params: PolyCommitmentSetupParameters
        point: 평가 점 (길이 num_vars)
        values: 다항식 평가 벡터 (길이 2^num_vars)
        blinds: poly_commit이 돌려준 행별 블라인딩
        eval_: 주장하는 평가값 f̃(point)
        eval_blind: commit_y = commit(gen_1, [eval_], eval_blind)의 블라인딩

    Returns:
        DotProductProofLog
    """
    transcript.append_protocol_name(PROTOCOL_NAME)

    left_eq, right_eq = split_point(params, point)
    lz = row_combination(params, values, left_eq)
    lz_blind = inner_product(left_eq, blinds)

    commit_lz = commit_with(params.gen_n, lz, lz_blind)
    commit_y = commit_with(params.gen_1, [eval_], eval_blind)
    transcript.append_point(b"Cx", commit_lz)
    transcript.append_point(b"Cy", commit_y)

    Q = params.gen_1.generators[0]
    H = params.gen_1.h
    bullet_proof, x_hat, a_hat, g_hat, r_hat = bullet_inner_product_prove(
        Q, params.gen_n.generators, H, lz, right_eq, lz_blind + eval_blind, transcript, rng
    )
    y_hat = x_hat * a_hat

    d = random_fr(rng)
    r_delta = random_fr(rng)
    r_beta = random_fr(rng)
    delta = ec_msm([g_hat, H], [d, r_delta])
    beta = ec_msm([Q, H], [d, r_beta])
    transcript.append_point(b"delta", delta)
    transcript.append_point(b"beta", beta)

    c = transcript.challenge_scalar(b"challenge_tau")
    z1 = d + c * y_hat
    z2 = a_hat * (c * r_hat + r_beta) + r_delta

    return DotProductProofLog(
        inner_product_proof=bullet_proof,
        delta=delta,
        beta=beta,
        z1=z1,
        z2=z2,
    )


def inner_product_verify(params, point, commits, commit_y, proof, transcript):
    """행 커밋먼트 commits가 point에서 commit_y에 담긴 값으로 평가됨을 검증한다.

    Raises:
        ParameterMismatch: 점의 길이가 파라미터 변수 수와 다를 때
        MalformedProof: 행 커밋먼트 개수가 맞지 않을 때
        CryptographicCheckFailed: 마지막 등식이 성립하지 않을 때
    """
    require_params(
        len(point) == params.num_vars,
        f"평가 점 길이 {len(point)} != 파라미터 변수 수 {params.num_vars}",
    )
    require_shape(
        len(commits) == params.num_rows,
        f"행 커밋먼트 {len(commits)}개, 기대값 {params.num_rows}개",
    )
    transcript.append_protocol_name(PROTOCOL_NAME)

    left_eq, right_eq = split_point(params, point)
    commit_lz = ec_msm(list(commits), left_eq)
    transcript.append_point(b"Cx", commit_lz)
    transcript.append_point(b"Cy", commit_y)
    gamma = ec_add(commit_lz, commit_y)

    a_hat, g_hat, gamma_hat = bullet_inner_product_verify(
        params.gen_n.generators, proof.inner_product_proof, gamma, right_eq, transcript
    )
    transcript.append_point(b"delta", proof.delta)
    transcript.append_point(b"beta", proof.beta)
    c = transcript.challenge_scalar(b"challenge_tau")

    Q = params.gen_1.generators[0]
    H = params.gen_1.h
    lhs = ec_add(ec_mul(ec_add(ec_mul(gamma_hat, c), proof.beta), a_hat), proof.delta)
    rhs = ec_add(ec_mul(ec_add(g_hat, ec_mul(Q, a_hat)), proof.z1), ec_mul(H, proof.z2))
    require(lhs == rhs, "inner-product-opening")

"""
시그마 프로토콜: 지식·곱·동등성 증명
=======================================

모든 커밋먼트는 gen_1 (생성자 G 하나와 블라인딩 생성자 h) 위의
Pedersen 커밋먼트 C = v·G + r·h 이다.

**지식 증명 (knowledge)**: C를 여는 (v, r)을 안다.
    α = t1·G + t2·h,  c ← transcript
    z1 = t1 + c·v,  z2 = t2 + c·r
    검증: z1·G + z2·h == c·C + α

**곱 증명 (product)**: X, Y, Z가 x, y, x·y 를 담는다.
    α = b1·G + b2·h,  β = b3·G + b4·h,  δ = b3·X + b5·h
    z = (b1 + c·x, b2 + c·rX, b3 + c·y, b4 + c·rY, b5 + c·(rZ − rX·y))
    검증: α + c·X == z1·G + z2·h
          β + c·Y == z3·G + z4·h
          δ + c·Z == z3·X + z5·h

**동등성 증명 (eq)**: C1, C2가 같은 값을 담는다 (블라인딩만 다름).
    α = r·h,  z = r + c·(r1 − r2)
    검증: z·h == c·(C1 − C2) + α
"""

from zkp.spartan.commitments import commit_with
from zkp.spartan.errors import require, require_shape
from zkp.spartan.field import ec_add, ec_mul, ec_sub, ec_msm, random_fr
from zkp.spartan.proof import EqProof, KnowledgeProof, ProductProof


# ─────────────────────────────────────────────────────────────────────
# 지식 증명
# ─────────────────────────────────────────────────────────────────────

def knowledge_prove(gens, value, blind, transcript, rng=None):
    commit = commit_with(gens, [value], blind)
    t1 = random_fr(rng)
    t2 = random_fr(rng)
    t_commit = commit_with(gens, [t1], t2)

    transcript.append_point(b"C", commit)
    transcript.append_point(b"alpha", t_commit)
    c = transcript.challenge_scalar(b"c")

    return KnowledgeProof(t_commit=t_commit, z1=t1 + c * value, z2=t2 + c * blind)


def knowledge_verify(gens, proof, commit, transcript):
    transcript.append_point(b"C", commit)
    transcript.append_point(b"alpha", proof.t_commit)
    c = transcript.challenge_scalar(b"c")

    lhs = commit_with(gens, [proof.z1], proof.z2)
    rhs = ec_add(ec_mul(commit, c), proof.t_commit)
    require(lhs == rhs, "knowledge")


# ─────────────────────────────────────────────────────────────────────
# 곱 증명
# ─────────────────────────────────────────────────────────────────────

def product_prove(gens, x, r_x, y, r_y, z, r_z, transcript, rng=None):
    """X = commit(x, r_x), Y = commit(y, r_y), Z = commit(z, r_z), z = x·y 를 증명한다."""
    x_commit = commit_with(gens, [x], r_x)
    y_commit = commit_with(gens, [y], r_y)
    z_commit = commit_with(gens, [z], r_z)

    b1, b2, b3, b4, b5 = (random_fr(rng) for _ in range(5))
    commit_alpha = commit_with(gens, [b1], b2)
    commit_beta = commit_with(gens, [b3], b4)
    commit_delta = ec_msm([x_commit, gens.h], [b3, b5])

    transcript.append_point(b"X", x_commit)
    transcript.append_point(b"Y", y_commit)
    transcript.append_point(b"Z", z_commit)
    transcript.append_point(b"alpha", commit_alpha)
    transcript.append_point(b"beta", commit_beta)
    transcript.append_point(b"delta", commit_delta)
    c = transcript.challenge_scalar(b"c")

    z_vec = (
        b1 + c * x,
        b2 + c * r_x,
        b3 + c * y,
        b4 + c * r_y,
        b5 + c * (r_z - r_x * y),
    )
    return ProductProof(
        commit_alpha=commit_alpha,
        commit_beta=commit_beta,
        commit_delta=commit_delta,
        z=z_vec,
    )


def product_verify(gens, proof, x_commit, y_commit, z_commit, transcript):
    require_shape(len(proof.z) == 5, f"곱 증명 응답은 5개여야 합니다: {len(proof.z)}")
    z1, z2, z3, z4, z5 = proof.z

    transcript.append_point(b"X", x_commit)
    transcript.append_point(b"Y", y_commit)
    transcript.append_point(b"Z", z_commit)
    transcript.append_point(b"alpha", proof.commit_alpha)
    transcript.append_point(b"beta", proof.commit_beta)
    transcript.append_point(b"delta", proof.commit_delta)
    c = transcript.challenge_scalar(b"c")

    require(
        ec_add(proof.commit_alpha, ec_mul(x_commit, c)) == commit_with(gens, [z1], z2),
        "product-x",
    )
    require(
        ec_add(proof.commit_beta, ec_mul(y_commit, c)) == commit_with(gens, [z3], z4),
        "product-y",
    )
    require(
        ec_add(proof.commit_delta, ec_mul(z_commit, c)) == ec_msm([x_commit, gens.h], [z3, z5]),
        "product-z",
    )


# ─────────────────────────────────────────────────────────────────────
# 동등성 증명
# ─────────────────────────────────────────────────────────────────────

def eq_prove(gens, commit1, blind1, commit2, blind2, transcript, rng=None):
    r = random_fr(rng)
    alpha = ec_mul(gens.h, r)

    transcript.append_point(b"C1", commit1)
    transcript.append_point(b"C2", commit2)
    transcript.append_point(b"alpha", alpha)
    c = transcript.challenge_scalar(b"c")

    return EqProof(alpha=alpha, z=r + c * (blind1 - blind2))


def eq_verify(gens, commit1, commit2, proof, transcript):
    transcript.append_point(b"C1", commit1)
    transcript.append_point(b"C2", commit2)
    transcript.append_point(b"alpha", proof.alpha)
    c = transcript.challenge_scalar(b"c")

    lhs = ec_mul(gens.h, proof.z)
    rhs = ec_add(ec_mul(ec_sub(commit1, commit2), c), proof.alpha)
    require(lhs == rhs, "commitment-equality")

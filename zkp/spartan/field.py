"""
Spartan 기반 모듈: 유한체(Finite Field) 및 G1 그룹 연산
=========================================================

Spartan 검증 엔진 전체에서 사용되는 대수적 도구를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. 합검사(sumcheck), 곱 회로, 메모리 검사의
  모든 주장(claim)과 챌린지는 FR 원소이다.

**G1 그룹**:
  Pedersen 벡터 커밋먼트가 사는 그룹. 점은 py_ecc bn128의 아핀 좌표
  튜플 (x, y)이며, 항등원(무한원점)은 None으로 표현한다.

**생성자(generator) 도출**:
  Pedersen 커밋먼트의 바인딩은 생성자들 사이의 이산로그 관계를 아무도
  모른다는 가정에 의존한다. 따라서 생성자는 G1의 스칼라배가 아니라
  해시-투-커브(try-and-increment)로 만든다. bn128 G1의 cofactor는 1이다.

사용 예시:
    >>> from zkp.spartan.field import FR, G1, ec_mul, ec_msm
    >>> P = ec_mul(G1, FR(5))
    >>> Q = ec_msm([G1, P], [FR(2), FR(3)])   # 2·G1 + 3·P
"""

import hashlib
import secrets

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128
from py_ecc import optimized_bn128 as opt


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공한다.
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (스칼라 필드 크기)
CURVE_ORDER = bn128.curve_order

# 기저 필드 크기 (G1 좌표가 사는 필드)
FIELD_MODULUS = bn128.field_modulus


# ─────────────────────────────────────────────────────────────────────
# G1 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

G1 = bn128.G1

# 항등원 (point at infinity)
Z1 = None

# y² = x³ + 3
_CURVE_B = 3


def _to_projective(point):
    if point is None:
        return opt.Z1
    return (opt.FQ(int(point[0])), opt.FQ(int(point[1])), opt.FQ.one())


def _to_affine(point):
    if opt.is_inf(point):
        return None
    x, y = opt.normalize(point)
    return (FQ(int(x)), FQ(int(y)))


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 점 또는 None
        scalar: 정수 또는 FR 원소

    Returns:
        G1 점 (scalar가 0이거나 point가 None이면 None)
    """
    if point is None:
        return None
    k = int(scalar) % CURVE_ORDER
    if k == 0:
        return None
    if k == 1:
        return point
    return _to_affine(opt.multiply(_to_projective(point), k))


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    if point is None:
        return None
    return bn128.neg(point)


def ec_sub(p1, p2):
    """p1 - p2."""
    return ec_add(p1, ec_neg(p2))


def ec_msm(points, scalars):
    """다중 스칼라 곱셈(MSM): Σᵢ scalarsᵢ · pointsᵢ.

    Pedersen 커밋먼트와 생성자 접기(folding)의 핵심 연산이다.
    projective 좌표에서 누적한 뒤 마지막에 한 번만 아핀으로 정규화하여
    점 덧셈마다 발생하는 역원 계산을 피한다.

    Args:
        points: G1 점 리스트 (None 허용)
        scalars: 같은 길이의 정수/FR 리스트

    Returns:
        G1 점 (결과가 항등원이면 None)

    Raises:
        ValueError: 두 리스트의 길이가 다를 때
    """
    if len(points) != len(scalars):
        raise ValueError(
            f"MSM 길이 불일치: points={len(points)}, scalars={len(scalars)}"
        )
    acc = opt.Z1
    for point, scalar in zip(points, scalars):
        if point is None:
            continue
        k = int(scalar) % CURVE_ORDER
        if k == 0:
            continue
        term = _to_projective(point)
        if k != 1:
            term = opt.multiply(term, k)
        acc = opt.add(acc, term)
    return _to_affine(acc)


def is_on_curve(point):
    """G1 점이 곡선 위에 있는지 확인한다 (None은 항등원으로 허용)."""
    if point is None:
        return True
    return bn128.is_on_curve(point, bn128.b)


def hash_to_g1(label, index):
    """레이블과 인덱스로부터 이산로그를 알 수 없는 G1 점을 도출한다.

    try-and-increment: x = H(label ‖ index ‖ ctr) mod q 를 뽑아
    x³ + 3 이 제곱잉여가 될 때까지 ctr를 증가시킨다.
    q ≡ 3 (mod 4)이므로 제곱근은 a^((q+1)/4) 로 계산된다.

    Args:
        label: 도메인 분리 레이블 (bytes)
        index: 생성자 번호

    Returns:
        G1 점 (x, y)
    """
    ctr = 0
    while True:
        h = hashlib.sha256()
        h.update(b"spartan-generator")
        h.update(len(label).to_bytes(4, "big"))
        h.update(label)
        h.update(index.to_bytes(8, "big"))
        h.update(ctr.to_bytes(4, "big"))
        x = int.from_bytes(h.digest(), "big") % FIELD_MODULUS
        rhs = (pow(x, 3, FIELD_MODULUS) + _CURVE_B) % FIELD_MODULUS
        y = pow(rhs, (FIELD_MODULUS + 1) // 4, FIELD_MODULUS)
        if (y * y) % FIELD_MODULUS == rhs:
            # 부호를 정규화하여 결과를 결정론적으로 만든다
            if y > FIELD_MODULUS - y:
                y = FIELD_MODULUS - y
            return (FQ(x), FQ(y))
        ctr += 1


# ─────────────────────────────────────────────────────────────────────
# 직렬화 및 난수
# ─────────────────────────────────────────────────────────────────────

def scalar_to_bytes(scalar):
    """FR 원소 → 32바이트 빅엔디안."""
    return (int(scalar) % CURVE_ORDER).to_bytes(32, "big")


def point_to_bytes(point):
    """G1 점 → 64바이트 (x ‖ y). 무한원점은 64바이트의 0."""
    if point is None:
        return b"\x00" * 64
    x, y = point
    return int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")


def random_fr(rng=None):
    """블라인딩용 임의의 FR 원소.

    Args:
        rng: random.Random 인스턴스 (테스트 재현용). None이면 secrets 사용.
    """
    if rng is None:
        return FR(secrets.randbelow(CURVE_ORDER))
    return FR(rng.randrange(CURVE_ORDER))


def inner_product(a, b):
    """두 FR 벡터의 내적 Σ aᵢ·bᵢ."""
    if len(a) != len(b):
        raise ValueError(f"내적 길이 불일치: {len(a)} != {len(b)}")
    acc = FR(0)
    for x, y in zip(a, b):
        acc = acc + x * y
    return acc

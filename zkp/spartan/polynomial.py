"""
Spartan 다항식 도구: 단변수 라운드 다항식과 다중선형 확장(MLE)
================================================================

**UniPoly (단변수)**:
  합검사 각 라운드에서 Prover가 보내는 다항식 g_j(X).
  계수 리스트 [c₀, c₁, ..., c_d]로 표현하며, PLONK의 Polynomial과 달리
  최고차 0 계수를 잘라내지 않는다. 계수 개수는 커밋먼트 벡터 길이이므로
  프로토콜 상수(3 또는 4)로 고정되어야 한다.

**다중선형 확장 (Multilinear Extension)**:
  길이 2^k 벡터 f를 {0,1}^k 위의 함수로 보고,
      f̃(r) = Σ_b eq(r, b) · f(b),   eq(r, b) = Π (rᵢbᵢ + (1-rᵢ)(1-bᵢ))
  로 확장한다. 인덱스의 최상위 비트가 r[0]에 대응한다 (big-endian).

  - eval_eq(r): 모든 b에 대한 eq(r, b) 테이블
  - bound_poly_var_top(v, r): 최상위 변수를 r로 고정 (합검사 라운드)
  - bound_poly_var_bot(v, r): 최하위 변수를 r로 고정

사용 예시:
    >>> p = UniPoly([FR(1), FR(2), FR(3)])   # 1 + 2X + 3X²
    >>> p.eval_at_zero() + p.eval_at_one()  # 합검사 등식의 좌변
    >>> evaluate_value([FR(5), FR(7)], [FR(0)])  # FR(5)
"""

from zkp.spartan.field import FR


# ─────────────────────────────────────────────────────────────────────
# 단변수 라운드 다항식
# ─────────────────────────────────────────────────────────────────────

class UniPoly:
    """고정 길이 계수 표현 단변수 다항식.

    예시:
        >>> p = UniPoly.from_evals([FR(1), FR(3), FR(7)])  # p(0)=1, p(1)=3, p(2)=7
        >>> p.coeffs                                      # [1, 1, 1] → 1 + X + X²
    """

    def __init__(self, coeffs):
        self.coeffs = [c if isinstance(c, FR) else FR(c) for c in coeffs]

    def __len__(self):
        return len(self.coeffs)

    def __eq__(self, other):
        if not isinstance(other, UniPoly):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __repr__(self):
        return f"UniPoly({[int(c) for c in self.coeffs]})"

    @property
    def degree(self):
        return len(self.coeffs) - 1

    def evaluate(self, point):
        """Horner 방법으로 p(point)를 계산한다."""
        result = FR(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def eval_at_zero(self):
        return self.coeffs[0]

    def eval_at_one(self):
        total = FR(0)
        for c in self.coeffs:
            total = total + c
        return total

    @classmethod
    def from_evals(cls, evals):
        """점 0, 1, ..., d 에서의 평가값을 보간하여 계수를 복원한다.

        라그랑주 보간: p(X) = Σᵢ evalsᵢ · Πⱼ≠ᵢ (X - j) / (i - j)

        Args:
            evals: [p(0), p(1), ..., p(d)]

        Returns:
            UniPoly: 계수 d+1개 (최고차가 0이어도 유지)
        """
        n = len(evals)
        coeffs = [FR(0)] * n
        for i in range(n):
            basis = [FR(1)]
            denom = FR(1)
            for j in range(n):
                if j == i:
                    continue
                # basis ← basis · (X - j)
                shifted = [FR(0)] * (len(basis) + 1)
                for k, c in enumerate(basis):
                    shifted[k] = shifted[k] - c * j
                    shifted[k + 1] = shifted[k + 1] + c
                basis = shifted
                denom = denom * (i - j)
            scale = FR(evals[i]) / denom
            for k in range(n):
                coeffs[k] = coeffs[k] + basis[k] * scale
        return cls(coeffs)


# ─────────────────────────────────────────────────────────────────────
# 크기 유틸리티
# ─────────────────────────────────────────────────────────────────────

def is_power_of_2(n):
    return n >= 1 and (n & (n - 1)) == 0


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱을 반환한다.

    예시:
        >>> next_power_of_2(3)  # 4
        >>> next_power_of_2(4)  # 4
    """
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p


def log2(n):
    """2의 거듭제곱 n의 밑 2 로그.

    Raises:
        ValueError: n이 2의 거듭제곱이 아닐 때
    """
    if not is_power_of_2(n):
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    return n.bit_length() - 1


# ─────────────────────────────────────────────────────────────────────
# 다중선형 다항식
# ─────────────────────────────────────────────────────────────────────

def eval_eq(r):
    """eq(r, b) 테이블을 계산한다 (b ∈ {0,1}^|r|, r[0]이 최상위 비트).

    Args:
        r: FR 원소 리스트

    Returns:
        list[FR]: 길이 2^|r|

    예시:
        >>> eval_eq([FR(3)])  # [1-3, 3] = [FR(-2), FR(3)]
    """
    evals = [FR(1)]
    for ri in r:
        nxt = []
        for e in evals:
            hi = e * ri
            nxt.append(e - hi)
            nxt.append(hi)
        evals = nxt
    return evals


def eval_eq_x_y(x, y):
    """eq(x, y) = Πᵢ (xᵢyᵢ + (1-xᵢ)(1-yᵢ))."""
    if len(x) != len(y):
        raise ValueError(f"eq 점 길이 불일치: {len(x)} != {len(y)}")
    result = FR(1)
    for xi, yi in zip(x, y):
        result = result * (xi * yi + (FR(1) - xi) * (FR(1) - yi))
    return result


def evaluate_value(evals, r):
    """벡터 evals의 다중선형 확장을 점 r에서 평가한다.

    Raises:
        ValueError: len(evals) != 2^|r|
    """
    if len(evals) != (1 << len(r)):
        raise ValueError(
            f"평가 벡터 길이 {len(evals)}가 2^{len(r)}과 다릅니다"
        )
    acc = FR(0)
    for e, v in zip(eval_eq(r), evals):
        acc = acc + e * v
    return acc


def bound_poly_var_top(poly, r):
    """최상위 변수를 r로 고정: v'[i] = v[i] + r·(v[i + n/2] - v[i])."""
    half = len(poly) // 2
    return [poly[i] + r * (poly[i + half] - poly[i]) for i in range(half)]


def bound_poly_var_bot(poly, r):
    """최하위 변수를 r로 고정: v'[i] = v[2i] + r·(v[2i+1] - v[2i])."""
    half = len(poly) // 2
    return [poly[2 * i] + r * (poly[2 * i + 1] - poly[2 * i]) for i in range(half)]


def combine_n_to_one(evals, cs):
    """여러 평가값을 챌린지 cs로 하나의 주장으로 합친다.

    최하위 변수부터 cs[-1], cs[-2], ... 순으로 고정하므로 결과는
    evaluate_value(evals, cs)와 같다.
    """
    poly = list(evals)
    for c in reversed(cs):
        poly = bound_poly_var_bot(poly, c)
    if len(poly) != 1:
        raise ValueError("결합 챌린지 수가 평가 벡터 길이와 맞지 않습니다")
    return poly[0]


def evaluate_mle(matrix, rx, ry):
    """희소 행렬의 다중선형 확장 M̃(rx, ry) = Σ v · eq(rx, row) · eq(ry, col).

    Args:
        matrix: (row, col, FR) 튜플 리스트
        rx, ry: 행/열 평가 점
    """
    eq_rx = eval_eq(rx)
    eq_ry = eval_eq(ry)
    acc = FR(0)
    for row, col, val in matrix:
        acc = acc + val * eq_rx[row] * eq_ry[col]
    return acc


def equalize_length(rx, ry):
    """짧은 점의 앞쪽을 0으로 채워 두 점의 길이를 맞춘다."""
    if len(rx) < len(ry):
        return [FR(0)] * (len(ry) - len(rx)) + list(rx), list(ry)
    if len(ry) < len(rx):
        return list(rx), [FR(0)] * (len(rx) - len(ry)) + list(ry)
    return list(rx), list(ry)

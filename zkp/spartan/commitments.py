"""
Pedersen 벡터 커밋먼트와 Hyrax 다항식 커밋먼트
================================================

**벡터 커밋먼트**:
    C = Σ gᵢ·vᵢ + h·blind

  - 바인딩: gᵢ, h 사이의 이산로그 관계를 모르면 다른 (v, blind)로 같은 C를
    만들 수 없다.
  - 은닉: blind가 균일 난수이면 C는 v에 대해 아무것도 드러내지 않는다.
  - 선형성: commit(v₁, b₁) + commit(v₂, b₂) = commit(v₁ + v₂, b₁ + b₂).
    Verifier는 이 성질로 커밋먼트끼리 직접 선형 결합을 계산한다.

**다항식 커밋먼트 (Hyrax)**:
  길이 2^s 평가 벡터를 L × R 행렬로 배치한다 (값 index = i·R + j).
  각 행을 gen_n으로 커밋하여 L개의 커밋먼트를 얻는다.

  점 r에서의 평가:
      f̃(r) = Σᵢ Σⱼ eq(r_L, i) · eq(r_R, j) · v[i·R + j]
           = ⟨ Σᵢ eq(r_L, i)·rowᵢ , eq(r_R) ⟩

  Verifier는 Σᵢ eq(r_L, i)·Cᵢ 로 "행 결합" 벡터의 커밋먼트를 스스로 만들고,
  그 벡터와 공개 벡터 eq(r_R)의 내적을 inner_product 모듈로 확인한다.

사용 예시:
    >>> C = commit(gens.generators, [FR(3)], gens.h, FR(0))
    >>> commits, blinds = poly_commit(pc_params, values)
"""

from zkp.spartan.field import FR, ec_msm, random_fr
from zkp.spartan.polynomial import eval_eq


def commit(generators, values, h, blind):
    """C = Σ gᵢ·vᵢ + h·blind.

    Raises:
        ValueError: 값이 생성자보다 많을 때
    """
    if len(values) > len(generators):
        raise ValueError(
            f"생성자 부족: values={len(values)}, generators={len(generators)}"
        )
    points = list(generators[:len(values)]) + [h]
    return ec_msm(points, list(values) + [blind])


def commit_with(gens, values, blind):
    """MultiCommitmentSetupParameters로 커밋한다."""
    return commit(gens.generators, values, gens.h, blind)


def poly_commit(params, values, blinds=None, rng=None):
    """평가 벡터를 행 단위로 커밋한다.

    Args:
        params: PolyCommitmentSetupParameters
        values: 길이 2^num_vars 의 FR 리스트
        blinds: 행별 블라인딩. None이면 새로 뽑는다.
        rng: 테스트 재현용 random.Random

    Returns:
        (commits, blinds): 각각 길이 num_rows 인 리스트
    """
    expected = params.num_rows * params.row_size
    if len(values) != expected:
        raise ValueError(f"다항식 길이 {len(values)}가 2^{params.num_vars}과 다릅니다")
    if blinds is None:
        blinds = [random_fr(rng) for _ in range(params.num_rows)]
    row_size = params.row_size
    commits = [
        commit_with(params.gen_n, values[i * row_size:(i + 1) * row_size], blinds[i])
        for i in range(params.num_rows)
    ]
    return commits, list(blinds)


def split_point(params, point):
    """평가 점을 (행 선택 eq 테이블, 열 선택 eq 테이블)로 나눈다."""
    left = params.left_num_vars
    return eval_eq(point[:left]), eval_eq(point[left:])


def row_combination(params, values, left_eq):
    """LZ[j] = Σᵢ L[i] · v[i·R + j]."""
    row_size = params.row_size
    combined = [FR(0)] * row_size
    for i, weight in enumerate(left_eq):
        base = i * row_size
        for j in range(row_size):
            combined[j] = combined[j] + weight * values[base + j]
    return combined

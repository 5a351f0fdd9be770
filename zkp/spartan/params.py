"""
Spartan 설정 파라미터 (Setup Parameters)
==========================================

Pedersen 커밋먼트에 쓰이는 생성자 벡터 묶음. 신뢰 설정(trusted setup)은
필요 없으며, 모든 생성자는 도메인 레이블로부터 hash_to_g1으로 결정론적으로
만들어진다. 따라서 같은 레이블과 같은 크기로 다시 생성하면 항상 같은
파라미터를 얻는다.

**계층 구조**:
  SetupParametersWithSpark
  ├── r1cs_satisfied_params: R1CSSatisfiedSetupParameters
  │     ├── sc_params: SumcheckSetupParameters (gen_1, gen_3, gen_4)
  │     └── pc_params: PolyCommitmentSetupParameters (gen_n, gen_1)
  └── r1cs_eval_params: R1CSEvalsSetupParameters
        ├── ops_params    (log n + 4 변수)
        ├── mem_params    (log m + 1 변수)
        └── derefs_params (log n + 3 변수)

**공유 규칙**:
  - PolyCommitmentSetupParameters의 gen_n과 gen_1은 같은 h를 공유한다.
    (내적 증명의 마지막 등식이 두 커밋먼트의 블라인딩을 합치기 때문)
  - 합검사의 gen_1은 다항식 커밋먼트의 gen_1과 같은 객체이다.

모든 파라미터는 불변(frozen)이며 여러 검증에서 읽기 전용으로 공유된다.
"""

from dataclasses import dataclass

from zkp.spartan.errors import require_params
from zkp.spartan.field import hash_to_g1


DEFAULT_SETUP_LABEL = b"spartan"


@dataclass(frozen=True)
class MultiCommitmentSetupParameters:
    """Pedersen 벡터 커밋먼트 생성자 (g₁, ..., g_n; h)."""

    generators: tuple
    h: tuple

    @property
    def size(self):
        return len(self.generators)

    @classmethod
    def generate(cls, n, label):
        points = [hash_to_g1(label, i) for i in range(n + 1)]
        return cls(generators=tuple(points[:n]), h=points[n])

    def split_at(self, k):
        """생성자를 [0, k)와 [k, n)으로 나눈다. 두 결과는 같은 h를 쓴다."""
        return (
            MultiCommitmentSetupParameters(self.generators[:k], self.h),
            MultiCommitmentSetupParameters(self.generators[k:], self.h),
        )


@dataclass(frozen=True)
class PolyCommitmentSetupParameters:
    """Hyrax 스타일 다중선형 다항식 커밋먼트 파라미터.

    2^num_vars 개의 평가값을 num_rows × row_size 행렬로 보고 각 행을
    gen_n으로 커밋한다. 평가 점의 앞쪽 num_vars // 2 개 좌표가 행을 고른다.
    """

    num_vars: int
    gen_n: MultiCommitmentSetupParameters
    gen_1: MultiCommitmentSetupParameters

    @property
    def left_num_vars(self):
        return self.num_vars // 2

    @property
    def right_num_vars(self):
        return self.num_vars - self.num_vars // 2

    @property
    def num_rows(self):
        return 1 << self.left_num_vars

    @property
    def row_size(self):
        return 1 << self.right_num_vars

    @classmethod
    def generate(cls, num_vars, label):
        row_size = 1 << (num_vars - num_vars // 2)
        gens = MultiCommitmentSetupParameters.generate(row_size + 1, label + b"-polycommit")
        gen_n, gen_1 = gens.split_at(row_size)
        return cls(num_vars=num_vars, gen_n=gen_n, gen_1=gen_1)


@dataclass(frozen=True)
class SumcheckSetupParameters:
    """영지식 합검사용 생성자: 주장(gen_1), 2차 라운드(gen_3), 3차 라운드(gen_4)."""

    gen_1: MultiCommitmentSetupParameters
    gen_3: MultiCommitmentSetupParameters
    gen_4: MultiCommitmentSetupParameters

    @classmethod
    def generate(cls, gen_1, label):
        return cls(
            gen_1=gen_1,
            gen_3=MultiCommitmentSetupParameters.generate(3, label + b"-sumcheck-gen3"),
            gen_4=MultiCommitmentSetupParameters.generate(4, label + b"-sumcheck-gen4"),
        )


@dataclass(frozen=True)
class R1CSSatisfiedSetupParameters:
    sc_params: SumcheckSetupParameters
    pc_params: PolyCommitmentSetupParameters

    @classmethod
    def generate(cls, num_vars, label=DEFAULT_SETUP_LABEL):
        """증인(witness) 다항식 변수 수 num_vars = log₂ t 에 맞는 파라미터를 만든다."""
        pc_params = PolyCommitmentSetupParameters.generate(num_vars, label + b"-r1cs-sat")
        sc_params = SumcheckSetupParameters.generate(pc_params.gen_1, label + b"-r1cs-sat")
        return cls(sc_params=sc_params, pc_params=pc_params)


@dataclass(frozen=True)
class R1CSEvalsSetupParameters:
    ops_params: PolyCommitmentSetupParameters
    mem_params: PolyCommitmentSetupParameters
    derefs_params: PolyCommitmentSetupParameters

    @classmethod
    def generate(cls, log_n, log_m, label=DEFAULT_SETUP_LABEL):
        """희소 행렬 인코딩 파라미터.

        Args:
            log_n: 행렬당 비영(non-zero) 항목 수 n의 로그
            log_m: 메모리 크기 m의 로그
        """
        return cls(
            ops_params=PolyCommitmentSetupParameters.generate(log_n + 4, label + b"-ops"),
            mem_params=PolyCommitmentSetupParameters.generate(log_m + 1, label + b"-mem"),
            derefs_params=PolyCommitmentSetupParameters.generate(log_n + 3, label + b"-derefs"),
        )


@dataclass(frozen=True)
class SetupParametersWithSpark:
    r1cs_satisfied_params: R1CSSatisfiedSetupParameters
    r1cs_eval_params: R1CSEvalsSetupParameters


def check_poly_commit_params(params, name):
    """생성자 수가 행 길이와 같고 gen_n과 gen_1이 같은 h를 쓰는지 확인한다.

    Raises:
        ParameterMismatch
    """
    require_params(
        params.gen_n.size == params.row_size,
        f"{name} 생성자 수 {params.gen_n.size} != 행 길이 {params.row_size}",
    )
    require_params(params.gen_1.size == 1, f"{name} gen_1 크기는 1이어야 합니다")
    require_params(params.gen_n.h == params.gen_1.h, f"{name} gen_n과 gen_1의 h가 다릅니다")

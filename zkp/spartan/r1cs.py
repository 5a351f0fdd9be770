"""
R1CS (Rank-1 Constraint System)
=================================

제약 형태: (A·z) ∘ (B·z) = (C·z)

**변수 배치 (z 벡터)**:
  z = [ aux₀, ..., aux_{t−1} | 1, input₁, ..., input_k, 0, ... ]
       └── 비공개 증인 (t개) ──┘ └──── 공개 입력 (t개) ────┘

  - t = num_vars = max(num_aux, num_inputs + 1) 이상의 2의 거듭제곱
  - aux 변수 i 는 열 i, 입력 j (0 = 상수 ONE) 는 열 t + j
  - 따라서 z의 다중선형 확장은 최상위 좌표 ry₀ 로 두 절반을 가른다.
      z̃(ry) = (1 − ry₀)·w̃(ry[1:]) + ry₀·ĩo(ry[1:])

**패딩**:
  - 제약 수: 2의 거듭제곱 (최소 2). 빈 행은 0·0 = 0 으로 항상 만족된다.
  - 행렬당 비영 항목 수 n: 세 행렬 중 최대값 이상의 2의 거듭제곱 (최소 2)

ConstraintSystem은 회로 합성기(synthesizer)가 변수를 할당하고 제약을 추가하는
인터페이스이다. 값 없이(None) 합성하면 설정 단계용 인스턴스만 얻는다.

사용 예시:
    >>> cs = ConstraintSystem()
    >>> x = cs.alloc(FR(3))
    >>> z = cs.alloc_input(FR(9))
    >>> cs.enforce(x, x, z)             # x · x = z
    >>> instance = cs.to_instance()
    >>> assignment = cs.assignment()
"""

from dataclasses import dataclass

from zkp.spartan.errors import MissingAssignment
from zkp.spartan.field import FR
from zkp.spartan.polynomial import log2, next_power_of_2


# ─────────────────────────────────────────────────────────────────────
# 변수와 선형 결합
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Variable:
    kind: str
    index: int


# 상수 1 (공개 입력 0번)
ONE = Variable("input", 0)


class LinearCombination:
    """Σ coeff · variable.

    예시:
        >>> lc = LinearCombination.of(y) + (FR(2), ONE)   # y + 2
    """

    def __init__(self, terms=None):
        self.terms = list(terms or [])

    @classmethod
    def of(cls, value):
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls([(FR(1), value)])
        return cls(value)

    def __add__(self, other):
        if isinstance(other, Variable):
            return LinearCombination(self.terms + [(FR(1), other)])
        if isinstance(other, LinearCombination):
            return LinearCombination(self.terms + other.terms)
        coeff, var = other
        return LinearCombination(self.terms + [(FR(coeff), var)])

    def __sub__(self, other):
        if isinstance(other, Variable):
            return LinearCombination(self.terms + [(FR(-1), other)])
        if isinstance(other, LinearCombination):
            return LinearCombination(self.terms + [(-coeff, var) for coeff, var in other.terms])
        coeff, var = other
        return LinearCombination(self.terms + [(-FR(coeff), var)])

    def evaluate(self, aux, inputs):
        total = FR(0)
        for coeff, var in self.terms:
            value = aux[var.index] if var.kind == "aux" else inputs[var.index]
            total = total + coeff * value
        return total


# ─────────────────────────────────────────────────────────────────────
# 인스턴스와 할당
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class R1CSInstance:
    """공개 R1CS 인스턴스.

    속성:
        num_constraints: 패딩된 제약 수 (2의 거듭제곱)
        num_aux: 비공개 변수 수
        num_inputs: 공개 입력 수 (상수 ONE 제외)
        num_vars: t (2의 거듭제곱)
        a_matrix, b_matrix, c_matrix: (row, col, FR) 튜플의 튜플
        num_nz_entries: 패딩된 행렬당 비영 항목 수
    """

    num_constraints: int
    num_aux: int
    num_inputs: int
    num_vars: int
    a_matrix: tuple
    b_matrix: tuple
    c_matrix: tuple
    num_nz_entries: int

    @property
    def num_rounds_x(self):
        return log2(self.num_constraints)

    @property
    def num_rounds_y(self):
        return log2(self.num_vars) + 1

    @property
    def num_cells(self):
        """행/열 메모리 크기 m."""
        return 1 << max(self.num_rounds_x, self.num_rounds_y)

    @property
    def matrices(self):
        return (self.a_matrix, self.b_matrix, self.c_matrix)

    def input_vector(self, inputs):
        """[1, inputs..., 0, ...] (길이 t)."""
        vec = [FR(1)] + [FR(v) for v in inputs]
        return vec + [FR(0)] * (self.num_vars - len(vec))

    def multiply_vec(self, z):
        """(A·z, B·z, C·z) 를 길이 num_constraints 벡터로 계산한다."""
        results = []
        for matrix in self.matrices:
            out = [FR(0)] * self.num_constraints
            for row, col, val in matrix:
                out[row] = out[row] + val * z[col]
            results.append(out)
        return tuple(results)


@dataclass(frozen=True)
class Assignment:
    aux: tuple
    inputs: tuple

    def witness_vector(self, instance):
        """비공개 절반: aux를 길이 t로 패딩."""
        return list(self.aux) + [FR(0)] * (instance.num_vars - len(self.aux))

    def z_vector(self, instance):
        return self.witness_vector(instance) + instance.input_vector(self.inputs)

    def is_satisfied(self, instance):
        az, bz, cz = instance.multiply_vec(self.z_vector(instance))
        return all(a * b == c for a, b, c in zip(az, bz, cz))


# ─────────────────────────────────────────────────────────────────────
# 제약 시스템 (회로 합성)
# ─────────────────────────────────────────────────────────────────────

class ConstraintSystem:
    """회로 합성기가 사용하는 변수 할당/제약 추가 인터페이스."""

    def __init__(self):
        self.aux_values = []
        self.input_values = [FR(1)]
        self.constraints = []

    def alloc(self, value=None):
        self.aux_values.append(None if value is None else FR(value))
        return Variable("aux", len(self.aux_values) - 1)

    def alloc_input(self, value=None):
        self.input_values.append(None if value is None else FR(value))
        return Variable("input", len(self.input_values) - 1)

    def enforce(self, a, b, c):
        """a · b = c 제약을 추가한다. 각 인자는 Variable 또는 LinearCombination."""
        self.constraints.append((
            LinearCombination.of(a),
            LinearCombination.of(b),
            LinearCombination.of(c),
        ))

    @property
    def num_aux(self):
        return len(self.aux_values)

    @property
    def num_inputs(self):
        return len(self.input_values) - 1

    def to_instance(self):
        num_vars = next_power_of_2(max(self.num_aux, self.num_inputs + 1))
        num_constraints = max(2, next_power_of_2(len(self.constraints)))

        def column(var):
            return var.index if var.kind == "aux" else num_vars + var.index

        matrices = []
        for pos in range(3):
            entries = {}
            for row, constraint in enumerate(self.constraints):
                for coeff, var in constraint[pos].terms:
                    key = (row, column(var))
                    entries[key] = entries.get(key, FR(0)) + coeff
            matrices.append(tuple(
                (row, col, val) for (row, col), val in sorted(entries.items()) if val != FR(0)
            ))

        num_nz = max(2, next_power_of_2(max(len(m) for m in matrices)))
        return R1CSInstance(
            num_constraints=num_constraints,
            num_aux=self.num_aux,
            num_inputs=self.num_inputs,
            num_vars=num_vars,
            a_matrix=matrices[0],
            b_matrix=matrices[1],
            c_matrix=matrices[2],
            num_nz_entries=num_nz,
        )

    def assignment(self):
        """Raises: MissingAssignment: 값이 없는 변수가 있을 때."""
        if any(v is None for v in self.aux_values):
            raise MissingAssignment("비공개 변수 값이 할당되지 않았습니다")
        if any(v is None for v in self.input_values):
            raise MissingAssignment("공개 입력 값이 할당되지 않았습니다")
        return Assignment(aux=tuple(self.aux_values), inputs=tuple(self.input_values[1:]))

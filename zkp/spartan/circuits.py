"""
예제 회로
==========

**곱셈 벤치마크 회로 (a · b = c)**:
  a, b 는 비공개, c = a·b 는 공개 입력.
  변수 수를 맞추기 위해 a의 복사본을 (num_variables − 3)개 더 할당하고,
  같은 제약 a · b = c 를 num_constraints 번 반복한다.

    - squat: 제약 6개 / 변수 11개
    - tall : 제약 11개 / 변수 6개

**미니 회로 (x · (y + 2) = z)**:
  x, y 비공개, z 공개. 상수 항이 있는 선형 결합 예제.

값(witness)을 주지 않으면 설정 단계용 인스턴스만 합성할 수 있다.

사용 예시:
    >>> cs = multiply_circuit(FR(3), FR(5), num_constraints=6, num_variables=11)
    >>> instance, assignment = cs.to_instance(), cs.assignment()
"""

from zkp.spartan.field import FR
from zkp.spartan.r1cs import ConstraintSystem, LinearCombination, ONE


SQUAT = {"num_constraints": 6, "num_variables": 11}
TALL = {"num_constraints": 11, "num_variables": 6}


def multiply_circuit(a=None, b=None, num_constraints=6, num_variables=11):
    cs = ConstraintSystem()
    c_value = None if a is None or b is None else FR(a) * FR(b)

    var_a = cs.alloc(a)
    var_b = cs.alloc(b)
    var_c = cs.alloc_input(c_value)
    for _ in range(3, num_variables):
        cs.alloc(a)

    for _ in range(num_constraints):
        cs.enforce(var_a, var_b, var_c)
    return cs


def mini_circuit(x=None, y=None):
    cs = ConstraintSystem()
    z_value = None if x is None or y is None else FR(x) * (FR(y) + 2)

    var_x = cs.alloc(x)
    var_y = cs.alloc(y)
    var_z = cs.alloc_input(z_value)
    cs.enforce(var_x, LinearCombination.of(var_y) + (2, ONE), var_z)
    return cs


CIRCUITS = {
    "multiply": multiply_circuit,
    "mini": mini_circuit,
}


def build_circuit(name, witness=None, **sizes):
    """이름으로 회로를 합성한다.

    Args:
        name: "multiply" 또는 "mini"
        witness: 비공개 값 dict ({"a", "b"} 또는 {"x", "y"}). None이면 값 없이 합성.
        sizes: multiply 회로의 num_constraints / num_variables

    Raises:
        KeyError: 알 수 없는 회로 이름
    """
    factory = CIRCUITS[name]
    witness = witness or {}
    if name == "multiply":
        return factory(witness.get("a"), witness.get("b"), **sizes)
    return factory(witness.get("x"), witness.get("y"))

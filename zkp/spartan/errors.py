"""
Spartan 오류 분류
==================

  - MalformedProof: 암호학적 검사 이전에 발견되는 모양(shape) 위반
    (벡터 길이 불일치, 레이어 수 오류, 역직렬화 실패)
  - MissingAssignment: 증명 생성에 필요한 값이 없음
  - ParameterMismatch: 설정 파라미터가 인스턴스보다 작음
  - CryptographicCheckFailed: 커밋먼트 등식, 합검사 일관성, 멀티셋 항등식 실패

CryptographicCheckFailed는 의도적으로 하나의 범주이다. 어떤 검사가 실패했는지는
`check` 속성에 남지만 디버그 로그 용도일 뿐, 최상위 검증 함수는 단순히 False를
반환한다.
"""


class SpartanError(Exception):
    """모든 Spartan 오류의 기반 클래스."""


class MalformedProof(SpartanError):
    pass


class MissingAssignment(SpartanError):
    pass


class ParameterMismatch(SpartanError):
    pass


class CryptographicCheckFailed(SpartanError):
    """검증 등식이 성립하지 않음.

    속성:
        check: 처음으로 실패한 등식의 태그 (로그 전용)
    """

    def __init__(self, check):
        super().__init__("cryptographic check failed")
        self.check = check


def require(condition, check):
    """condition이 거짓이면 CryptographicCheckFailed(check)를 발생시킨다."""
    if not condition:
        raise CryptographicCheckFailed(check)


def require_shape(condition, message):
    """condition이 거짓이면 MalformedProof(message)를 발생시킨다."""
    if not condition:
        raise MalformedProof(message)


def require_params(condition, message):
    """condition이 거짓이면 ParameterMismatch(message)를 발생시킨다."""
    if not condition:
        raise ParameterMismatch(message)

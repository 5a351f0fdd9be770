"""
Spartan Fiat-Shamir Transcript
================================

대화식 Spartan 프로토콜을 비대화식으로 바꾸는 트랜스크립트.

**동작 방식**:
  - append_message(label, data): 레이블과 메시지를 길이 접두사와 함께 누적한다.
    길이 접두사 덕분에 서로 다른 메시지 열이 같은 바이트열로 합쳐지지 않는다.
  - challenge_bytes(label, n): 지금까지 누적된 전체 상태를 SHA-256으로 확장하여
    n바이트를 뽑고, 그 출력을 다시 상태에 추가한다 (체이닝).
  - challenge_scalar(label): 31바이트를 뽑아 FR 원소로 해석한다.

**31바이트 챌린지**:
  31바이트(248비트) 정수는 항상 CURVE_ORDER(≈2^254)보다 작으므로 모듈러
  축소 없이 FR 원소가 된다. 대신 챌린지가 [0, 2^248) 구간에만 분포하여
  전체 필드에서 균일하게 뽑는 것보다 약간의 건전성 손실이 있다.

**순서 의존성**:
  모든 챌린지는 그 이전의 모든 흡수(absorb)에 의존한다. Prover와 Verifier는
  정확히 같은 순서로 같은 메시지를 추가해야 한다. 검증 호출마다 새
  트랜스크립트를 만들어야 하며 재사용하면 안 된다.

사용 예시:
    >>> t = Transcript(b"Spartan NIZK proof")
    >>> t.append_point(b"comm_poly", commitment)
    >>> r = t.challenge_scalar(b"challenge_nextround")
"""

import hashlib

from zkp.spartan.field import FR, scalar_to_bytes, point_to_bytes


# 챌린지 하나를 만드는 데 쓰는 바이트 수
CHALLENGE_BYTES = 31


def bytes_to_field(buf):
    """고정 길이 버퍼(31바이트)를 리틀엔디안 정수로 읽어 FR 원소로 변환한다."""
    return FR(int.from_bytes(bytes(buf), "little"))


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 지금까지 흡수된 모든 (레이블, 메시지) 바이트열
    """

    def __init__(self, label=b"spartan"):
        self.state = bytearray()
        self.append_message(b"dom-sep", label)

    def _absorb(self, data):
        self.state.extend(len(data).to_bytes(8, "big"))
        self.state.extend(data)

    def append_message(self, label, message):
        """도메인 분리된 메시지를 흡수한다.

        Args:
            label: 바이트열 레이블 (예: b"comm_poly")
            message: 바이트열 메시지
        """
        self._absorb(bytes(label))
        self._absorb(bytes(message))

    def append_protocol_name(self, name):
        self.append_message(b"protocol-name", name)

    def append_scalar(self, label, scalar):
        self.append_message(label, scalar_to_bytes(scalar))

    def append_scalars(self, label, scalars):
        """FR 벡터를 하나의 메시지로 흡수한다."""
        self.append_message(label, b"".join(scalar_to_bytes(s) for s in scalars))

    def append_point(self, label, point):
        self.append_message(label, point_to_bytes(point))

    def append_points(self, label, points):
        """G1 점 리스트를 하나의 메시지로 흡수한다."""
        self.append_message(label, b"".join(point_to_bytes(p) for p in points))

    def challenge_bytes(self, label, n):
        """누적 상태로부터 n바이트의 의사난수를 도출한다.

        출력 블록 i = SHA-256(state ‖ label ‖ i). 출력 전체가 상태에 다시
        흡수되므로 같은 레이블로 연속 호출해도 서로 다른 값이 나온다.

        Args:
            label: 챌린지 레이블
            n: 필요한 바이트 수

        Returns:
            bytes: 길이 n
        """
        self._absorb(bytes(label))
        self._absorb(n.to_bytes(8, "big"))
        seed = bytes(self.state)
        out = bytearray()
        counter = 0
        while len(out) < n:
            out.extend(hashlib.sha256(seed + counter.to_bytes(4, "big")).digest())
            counter += 1
        out = bytes(out[:n])
        self._absorb(out)
        return out

    def challenge_scalar(self, label):
        """31바이트 챌린지를 FR 원소로 반환한다."""
        return bytes_to_field(self.challenge_bytes(label, CHALLENGE_BYTES))

    def challenge_vector(self, label, n):
        """같은 레이블로 n개의 챌린지를 연속해서 뽑는다."""
        return [self.challenge_scalar(label) for _ in range(n)]

"""
오프라인 메모리 검사 (Offline Memory Checking)
================================================

크기 m의 읽기 전용 메모리를 n번 읽는 접근 기록이 일관됨을, 접근 패턴을
드러내지 않고 보인다. 각 셀은 (주소, 값, 타임스탬프) 튜플로 표현된다.

  - init : 모든 셀 (a, mem[a], 0)
  - read : 접근마다 (addr, 읽은 값, read_ts)
  - write: 접근마다 (addr, 읽은 값, read_ts + 1)
  - audit: 모든 셀 (a, mem[a], 최종 타임스탬프)

모든 읽기가 메모리 값을 정확히 돌려주었다면 멀티셋 항등식

    init ∪ write == read ∪ audit

이 성립한다. 튜플을 해시 h(a, v, t) = a·γ1² + v·γ1 + t − γ2 로 필드 원소로
바꾸면 항등식은 곱의 등식이 된다.

    Π init · Π write == Π read · Π audit

타임스탬프는 차원(행/열)마다 하나의 메모리를 A, B, C 세 접근 열이 차례로
공유하며 계산한다. 따라서 read/write는 행렬별 리스트이고 init/audit는 하나다.

사용 예시:
    >>> read_ts, audit_ts = compute_timestamps([addrs_a, addrs_b, addrs_c], m)
    >>> leaves = memory_leaves(mem, [addrs_a, ...], [vals_a, ...], read_ts, audit_ts, gamma)
"""

from dataclasses import dataclass

from zkp.spartan.errors import require
from zkp.spartan.field import FR
from zkp.spartan.polynomial import eval_eq_x_y
from zkp.spartan.proof import MemoryClaims


def compute_timestamps(addr_lists, num_cells):
    """접근 열들로부터 읽기 타임스탬프와 감사 타임스탬프를 계산한다.

    Args:
        addr_lists: 접근 주소 리스트들 (행렬 A, B, C 순서)
        num_cells: 메모리 크기 m

    Returns:
        (read_ts_lists, audit_ts): 정수 리스트
    """
    audit_ts = [0] * num_cells
    read_ts_lists = []
    for addrs in addr_lists:
        read_ts = []
        for addr in addrs:
            ts = audit_ts[addr]
            read_ts.append(ts)
            audit_ts[addr] = ts + 1
        read_ts_lists.append(read_ts)
    return read_ts_lists, audit_ts


def hash_tuple(addr, value, ts, gamma):
    """h(a, v, t) = a·γ1² + v·γ1 + t − γ2."""
    gamma1, gamma2 = gamma
    return gamma1 * gamma1 * addr + value * gamma1 + ts - gamma2


@dataclass(frozen=True)
class MemoryLeaves:
    """곱 회로의 잎이 될 네 종류의 해시 벡터."""

    init: list
    read: list
    write: list
    audit: list


def memory_leaves(memory, addr_lists, value_lists, read_ts_lists, audit_ts, gamma):
    """메모리와 접근 기록으로부터 해시 잎 벡터를 만든다.

    Args:
        memory: 셀 값 리스트 (길이 m)
        addr_lists: 행렬별 접근 주소
        value_lists: 행렬별 읽은 값 (정상이라면 memory[addr])
        read_ts_lists: compute_timestamps의 읽기 타임스탬프
        audit_ts: compute_timestamps의 감사 타임스탬프
        gamma: (γ1, γ2)
    """
    init = [hash_tuple(FR(a), v, FR(0), gamma) for a, v in enumerate(memory)]
    audit = [hash_tuple(FR(a), v, FR(ts), gamma) for a, (v, ts) in enumerate(zip(memory, audit_ts))]
    read, write = [], []
    for addrs, values, read_ts in zip(addr_lists, value_lists, read_ts_lists):
        read.append([hash_tuple(FR(a), v, FR(t), gamma) for a, v, t in zip(addrs, values, read_ts)])
        write.append([hash_tuple(FR(a), v, FR(t + 1), gamma) for a, v, t in zip(addrs, values, read_ts)])
    return MemoryLeaves(init, read, write, audit)


def _product(values):
    acc = FR(1)
    for v in values:
        acc = acc * v
    return acc


def multiset_claims(leaves):
    """잎 벡터들의 전체 곱을 MemoryClaims로 묶는다."""
    return MemoryClaims(
        init=_product(leaves.init),
        read=tuple(_product(r) for r in leaves.read),
        write=tuple(_product(w) for w in leaves.write),
        audit=_product(leaves.audit),
    )


def check_multiset_identity(claims, check="memory-multiset"):
    """init · Π write == Π read · audit."""
    lhs = claims.init * _product(claims.write)
    rhs = _product(claims.read) * claims.audit
    require(lhs == rhs, check)


def init_addr_eval(rands_mem):
    """주소 다항식 addr(b) = b (정수)의 다중선형 확장: Σ rᵢ·2^(k−1−i)."""
    k = len(rands_mem)
    acc = FR(0)
    for i, r in enumerate(rands_mem):
        acc = acc + r * (1 << (k - 1 - i))
    return acc


def verify_memory_hashes(claims, point, rands_mem, eval_ops_val, eval_addr_ops,
                         eval_read_ts, eval_audit_ts, gamma):
    """곱 회로가 돌려준 잎 주장을 해시 정의로 다시 계산하여 비교한다.

    메모리 값 다항식은 mem(b) = eq(point, b) 이므로 Verifier가 직접 평가한다.

    Args:
        claims: 곱 회로 논증이 돌려준 잎 주장 (MemoryClaims, rands 점에서)
        point: 메모리를 정의하는 평가 점 (rx 또는 ry)
        rands_mem: 메모리 곱 회로의 점
        eval_ops_val: 행렬별 읽은 값 다항식의 ops 점 평가값
        eval_addr_ops: 행렬별 주소 다항식 평가값
        eval_read_ts: 행렬별 읽기 타임스탬프 평가값
        eval_audit_ts: 감사 타임스탬프의 mem 점 평가값
        gamma: (γ1, γ2)
    """
    init_addr = init_addr_eval(rands_mem)
    init_val = eval_eq_x_y(point, rands_mem)

    require(claims.init == hash_tuple(init_addr, init_val, FR(0), gamma), "memory-init-hash")
    for claim_read, claim_write, addr, val, ts in zip(
        claims.read, claims.write, eval_addr_ops, eval_ops_val, eval_read_ts
    ):
        require(claim_read == hash_tuple(addr, val, ts, gamma), "memory-read-hash")
        require(claim_write == hash_tuple(addr, val, ts + FR(1), gamma), "memory-write-hash")
    require(claims.audit == hash_tuple(init_addr, init_val, eval_audit_ts, gamma), "memory-audit-hash")

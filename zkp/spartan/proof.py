"""
Spartan 증명 구조체
====================

Prover가 한 번 만들고 Verifier가 한 번 소비하는 불변 레코드들.
모든 리스트 필드는 tuple로 보관하여 증명이 만들어진 뒤 바뀌지 않게 한다.

구성:
  NIZKProof ─── R1CSSatProof ─┬─ SumCheckProof × 2 (SumCheckEvalProof × rounds)
                              ├─ KnowledgeProductCommit / KnowledgeProductProof
                              ├─ EqProof × 2
                              └─ DotProductProofLog (BulletReductionProof)
  SNARKProof ─┬─ R1CSSatProof
              └─ R1CSEvalsProof ─┬─ ProductLayerProof (MemoryClaims, ProductCircuitEvalProof × 2)
                                 └─ HashLayerProof
  EncodeCommit: 인덱싱 단계에서 한 번 만들어지는 희소 행렬 커밋먼트
"""

from dataclasses import dataclass


# ─────────────────────────────────────────────────────────────────────
# 시그마 프로토콜 / 내적 증명
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KnowledgeProof:
    t_commit: tuple
    z1: object
    z2: object


@dataclass(frozen=True)
class ProductProof:
    commit_alpha: tuple
    commit_beta: tuple
    commit_delta: tuple
    z: tuple


@dataclass(frozen=True)
class EqProof:
    alpha: tuple
    z: object


@dataclass(frozen=True)
class BulletReductionProof:
    l_vec: tuple
    r_vec: tuple


@dataclass(frozen=True)
class DotProductProofLog:
    inner_product_proof: BulletReductionProof
    delta: tuple
    beta: tuple
    z1: object
    z2: object


# ─────────────────────────────────────────────────────────────────────
# 합검사
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SumCheckEvalProof:
    """라운드 하나의 평가 일관성 증명 (d와 ⟨a, d⟩의 커밋먼트, 응답 z)."""

    d_commit: tuple
    dot_cd_commit: tuple
    z: tuple
    z_delta: object
    z_beta: object


@dataclass(frozen=True)
class SumCheckProof:
    comm_polys: tuple
    comm_evals: tuple
    proofs: tuple


# ─────────────────────────────────────────────────────────────────────
# R1CS 만족 증명
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KnowledgeProductCommit:
    """Az(rx), Bz(rx), Cz(rx), Az(rx)·Bz(rx) 의 커밋먼트."""

    va_commit: tuple
    vb_commit: tuple
    vc_commit: tuple
    prod_commit: tuple


@dataclass(frozen=True)
class KnowledgeProductProof:
    knowledge_proof: KnowledgeProof
    product_proof: ProductProof


@dataclass(frozen=True)
class R1CSSatProof:
    commit_witness: tuple
    proof_one: SumCheckProof
    knowledge_product_commit: KnowledgeProductCommit
    knowledge_product_proof: KnowledgeProductProof
    sc1_eq_proof: EqProof
    proof_two: SumCheckProof
    commit_ry: tuple
    product_proof: DotProductProofLog
    sc2_eq_proof: EqProof


# ─────────────────────────────────────────────────────────────────────
# 곱 회로 / 메모리 검사 / 희소 평가
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MemoryClaims:
    """한 차원(행 또는 열) 메모리의 네 가지 곱 주장.

    init, audit는 스칼라, read, write는 행렬(A, B, C)별 리스트이다.
    """

    init: object
    read: tuple
    write: tuple
    audit: object


@dataclass(frozen=True)
class LayerProof:
    polys: tuple
    claim_prod_left: tuple
    claim_prod_right: tuple


@dataclass(frozen=True)
class ProductCircuitEvalProof:
    layers_proof: tuple
    claim_dotp_row: tuple = ()
    claim_dotp_col: tuple = ()
    claim_dotp_val: tuple = ()


@dataclass(frozen=True)
class ProductLayerProof:
    eval_row: MemoryClaims
    eval_col: MemoryClaims
    eval_dotp_left: tuple
    eval_dotp_right: tuple
    proof_memory: ProductCircuitEvalProof
    proof_ops: ProductCircuitEvalProof


@dataclass(frozen=True)
class AddrTimestampEvals:
    """ops 점에서의 주소·읽기 타임스탬프 평가값과 mem 점에서의 감사 타임스탬프."""

    addr: tuple
    read_ts: tuple
    audit_ts: object


@dataclass(frozen=True)
class HashLayerProof:
    eval_row_ops_val: tuple
    eval_col_ops_val: tuple
    evals_row: AddrTimestampEvals
    evals_col: AddrTimestampEvals
    evals_val: tuple
    proof_derefs: DotProductProofLog
    proof_ops: DotProductProofLog
    proof_mem: DotProductProofLog


@dataclass(frozen=True)
class R1CSEvalsProof:
    derefs_commit: tuple
    prod_layer_proof: ProductLayerProof
    hash_layer_proof: HashLayerProof


# ─────────────────────────────────────────────────────────────────────
# 최상위 증명 및 인덱스 커밋먼트
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NIZKProof:
    r1cs_satisfied_proof: R1CSSatProof
    rx: tuple
    ry: tuple


@dataclass(frozen=True)
class SNARKProof:
    r1cs_satisfied_proof: R1CSSatProof
    matrix_evals: tuple
    r1cs_evals_proof: R1CSEvalsProof


@dataclass(frozen=True)
class EncodeCommit:
    """희소 행렬 인코딩 커밋먼트 (Verifier용).

    속성:
        n: 행렬당 비영 항목 수 (2의 거듭제곱)
        m: 메모리 크기 (2의 거듭제곱)
        ops_commit: 주소·타임스탬프·값 다항식의 행 커밋먼트
        mem_commit: 감사 타임스탬프 다항식의 행 커밋먼트
    """

    n: int
    m: int
    ops_commit: tuple
    mem_commit: tuple

"""
희소 다항식 평가 논증 (Sparse Polynomial Evaluation)
======================================================

SNARK Verifier가 행렬 평가값 Ã(rx, ry), B̃(rx, ry), C̃(rx, ry)를 행렬 크기에
비례하는 비용 없이 확인하게 한다.

**희소 인코딩**:
  행렬 M의 비영 항목 j마다 (row_j, col_j, val_j)를 두면

    M̃(rx, ry) = Σⱼ eq(rx, row_j) · eq(ry, col_j) · val_j
              = Σⱼ mem_row[row_j] · mem_col[col_j] · val_j

  mem_row = eq(rx, ·), mem_col = eq(ry, ·) 는 크기 m의 "메모리"이고,
  row_j, col_j 는 그 메모리를 읽는 주소이다. 읽은 값(deref)이 올바름은
  오프라인 메모리 검사(memory 모듈)로, 전체 합은 곱 회로 논증의 내적 회로로
  증명한다.

**인덱싱 (encode)**: 회로마다 한 번
  ops 다항식 (16 블록 × n):
    [row_addr A,B,C | row_read_ts A,B,C | col_addr A,B,C | col_read_ts A,B,C | val A,B,C | 0]
  mem 다항식 (2 블록 × m):
    [row_audit_ts | col_audit_ts]
  두 다항식의 커밋먼트가 EncodeCommit이다.

**증명 흐름**:
  1. derefs (행/열 각 3개, 0 블록 2개) 를 커밋하고 흡수
  2. (γ1, γ2) 도출
  3. 곱 레이어: 메모리 곱 주장 + 내적 주장 → 곱 회로 논증 두 개 (ops, mem)
  4. 해시 레이어: derefs/ops/mem 다항식을 곱 회로의 점에서 열고, 해시 정의로
     잎 주장을 재계산
"""

from dataclasses import dataclass

from zkp.spartan.commitments import commit_with, poly_commit
from zkp.spartan.errors import require, require_params, require_shape
from zkp.spartan.field import FR
from zkp.spartan.inner_product import inner_product_prove, inner_product_verify
from zkp.spartan.params import check_poly_commit_params
from zkp.spartan.memory import (
    check_multiset_identity,
    compute_timestamps,
    memory_leaves,
    multiset_claims,
    verify_memory_hashes,
)
from zkp.spartan.polynomial import (
    combine_n_to_one,
    eval_eq,
    equalize_length,
    evaluate_value,
    log2,
)
from zkp.spartan.product_circuit import (
    DotProductCircuit,
    ProductCircuit,
    product_circuit_eval_prove,
    product_circuit_eval_verify,
)
from zkp.spartan.proof import (
    AddrTimestampEvals,
    EncodeCommit,
    HashLayerProof,
    MemoryClaims,
    ProductLayerProof,
    R1CSEvalsProof,
)


NUM_MATRICES = 3

# ops 다항식 블록 수 (15개 + 0 블록 1개), derefs 블록 수 (6개 + 0 블록 2개)
OPS_BLOCKS = 16
DEREFS_BLOCKS = 8


# ─────────────────────────────────────────────────────────────────────
# 인덱싱
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Encode:
    """Prover용 희소 행렬 인코딩 (조밀 벡터와 타임스탬프)과 그 커밋먼트."""

    n: int
    m: int
    row_addr: list
    col_addr: list
    val: list
    row_read_ts: list
    row_audit_ts: list
    col_read_ts: list
    col_audit_ts: list
    ops_values: list
    mem_values: list
    ops_blinds: list
    mem_blinds: list
    commit: EncodeCommit


def _as_fr(values):
    return [FR(v) for v in values]


def check_eval_params(params, n, m):
    require_params(
        params.ops_params.num_vars == log2(n) + 4,
        f"ops 파라미터 변수 수 {params.ops_params.num_vars} != log n + 4",
    )
    require_params(
        params.mem_params.num_vars == log2(m) + 1,
        f"mem 파라미터 변수 수 {params.mem_params.num_vars} != log m + 1",
    )
    require_params(
        params.derefs_params.num_vars == log2(n) + 3,
        f"derefs 파라미터 변수 수 {params.derefs_params.num_vars} != log n + 3",
    )
    check_poly_commit_params(params.ops_params, "ops_params")
    check_poly_commit_params(params.mem_params, "mem_params")
    check_poly_commit_params(params.derefs_params, "derefs_params")


def encode(params, instance):
    """R1CS 행렬을 희소 인코딩하고 커밋한다.

    Args:
        params: R1CSEvalsSetupParameters
        instance: R1CSInstance

    Returns:
        (Encode, EncodeCommit)
    """
    n, m = instance.num_nz_entries, instance.num_cells
    check_eval_params(params, n, m)

    row_addr, col_addr, val = [], [], []
    for matrix in instance.matrices:
        pad = n - len(matrix)
        row_addr.append([row for row, _, _ in matrix] + [0] * pad)
        col_addr.append([col for _, col, _ in matrix] + [0] * pad)
        val.append([v for _, _, v in matrix] + [FR(0)] * pad)

    row_ts = compute_timestamps(row_addr, m)
    col_ts = compute_timestamps(col_addr, m)

    ops_values = []
    for block in (row_addr, row_ts[0], col_addr, col_ts[0]):
        for vec in block:
            ops_values.extend(_as_fr(vec))
    for vec in val:
        ops_values.extend(vec)
    ops_values.extend([FR(0)] * (OPS_BLOCKS * n - len(ops_values)))
    mem_values = _as_fr(row_ts[1]) + _as_fr(col_ts[1])

    ops_commit, ops_blinds = poly_commit(
        params.ops_params, ops_values, [FR(0)] * params.ops_params.num_rows
    )
    mem_commit, mem_blinds = poly_commit(
        params.mem_params, mem_values, [FR(0)] * params.mem_params.num_rows
    )

    commit = EncodeCommit(n=n, m=m, ops_commit=tuple(ops_commit), mem_commit=tuple(mem_commit))
    enc = Encode(
        n=n, m=m, row_addr=row_addr, col_addr=col_addr, val=val,
        row_read_ts=row_ts[0], row_audit_ts=row_ts[1],
        col_read_ts=col_ts[0], col_audit_ts=col_ts[1],
        ops_values=ops_values, mem_values=mem_values,
        ops_blinds=ops_blinds, mem_blinds=mem_blinds,
        commit=commit,
    )
    return enc, commit


def absorb_encode_commit(transcript, encode_commit):
    """인덱스 커밋먼트를 트랜스크립트에 묶는다."""
    transcript.append_message(
        b"encode_size",
        encode_commit.n.to_bytes(8, "big") + encode_commit.m.to_bytes(8, "big"),
    )
    transcript.append_points(b"encode_ops_commit", encode_commit.ops_commit)
    transcript.append_points(b"encode_mem_commit", encode_commit.mem_commit)


# ─────────────────────────────────────────────────────────────────────
# 곱 레이어
# ─────────────────────────────────────────────────────────────────────

def _append_memory_claims(transcript, prefix, claims):
    transcript.append_scalar(prefix + b"_init", claims.init)
    transcript.append_scalars(prefix + b"_read", claims.read)
    transcript.append_scalars(prefix + b"_write", claims.write)
    transcript.append_scalar(prefix + b"_audit", claims.audit)


def product_layer_prove(enc, mem_row, mem_col, row_derefs, col_derefs, gamma, transcript):
    transcript.append_protocol_name(b"Sparse polynomial product layer proof")

    row_leaves = memory_leaves(
        mem_row, enc.row_addr, row_derefs, enc.row_read_ts, enc.row_audit_ts, gamma
    )
    col_leaves = memory_leaves(
        mem_col, enc.col_addr, col_derefs, enc.col_read_ts, enc.col_audit_ts, gamma
    )
    eval_row = multiset_claims(row_leaves)
    eval_col = multiset_claims(col_leaves)
    _append_memory_claims(transcript, b"claim_row_eval", eval_row)
    _append_memory_claims(transcript, b"claim_col_eval", eval_col)

    half = enc.n // 2
    dotp_circuits = []
    eval_dotp_left, eval_dotp_right = [], []
    for k in range(NUM_MATRICES):
        left = DotProductCircuit(row_derefs[k][:half], col_derefs[k][:half], enc.val[k][:half])
        right = DotProductCircuit(row_derefs[k][half:], col_derefs[k][half:], enc.val[k][half:])
        eval_dotp_left.append(left.evaluate())
        eval_dotp_right.append(right.evaluate())
        transcript.append_scalar(b"claim_eval_dotp_left", eval_dotp_left[k])
        transcript.append_scalar(b"claim_eval_dotp_right", eval_dotp_right[k])
        dotp_circuits.extend([left, right])

    ops_circuits = [
        ProductCircuit(leaves)
        for leaves in row_leaves.read + row_leaves.write + col_leaves.read + col_leaves.write
    ]
    proof_ops, _, _, ops_rands = product_circuit_eval_prove(ops_circuits, dotp_circuits, transcript)

    mem_circuits = [
        ProductCircuit(leaves)
        for leaves in (row_leaves.init, row_leaves.audit, col_leaves.init, col_leaves.audit)
    ]
    proof_mem, _, _, mem_rands = product_circuit_eval_prove(mem_circuits, [], transcript)

    proof = ProductLayerProof(
        eval_row=eval_row,
        eval_col=eval_col,
        eval_dotp_left=tuple(eval_dotp_left),
        eval_dotp_right=tuple(eval_dotp_right),
        proof_memory=proof_mem,
        proof_ops=proof_ops,
    )
    return proof, ops_rands, mem_rands


def _check_memory_claims_shape(claims, name):
    require_shape(
        len(claims.read) == NUM_MATRICES and len(claims.write) == NUM_MATRICES,
        f"{name} 메모리 읽기/쓰기 주장은 {NUM_MATRICES}개여야 합니다",
    )


def product_layer_verify(proof, n, m, evals, transcript):
    """메모리 멀티셋 항등식과 내적 합을 확인하고 곱 회로 논증 두 개를 검증한다.

    Returns:
        (claims_ops, claims_ops_dotp, ops_rands, claims_mem, mem_rands)
    """
    transcript.append_protocol_name(b"Sparse polynomial product layer proof")
    _check_memory_claims_shape(proof.eval_row, "행")
    _check_memory_claims_shape(proof.eval_col, "열")
    require_shape(
        len(proof.eval_dotp_left) == NUM_MATRICES and len(proof.eval_dotp_right) == NUM_MATRICES,
        f"내적 주장은 행렬마다 하나씩 {NUM_MATRICES}개여야 합니다",
    )

    check_multiset_identity(proof.eval_row, "row-memory-multiset")
    _append_memory_claims(transcript, b"claim_row_eval", proof.eval_row)
    check_multiset_identity(proof.eval_col, "col-memory-multiset")
    _append_memory_claims(transcript, b"claim_col_eval", proof.eval_col)

    claims_dotp_circuit = []
    for left, right, eval_ in zip(proof.eval_dotp_left, proof.eval_dotp_right, evals):
        require(left + right == eval_, "sparse-dot-product")
        transcript.append_scalar(b"claim_eval_dotp_left", left)
        transcript.append_scalar(b"claim_eval_dotp_right", right)
        claims_dotp_circuit.extend([left, right])

    row, col = proof.eval_row, proof.eval_col
    claims_prod_circuit = list(row.read) + list(row.write) + list(col.read) + list(col.write)
    claims_ops, claims_ops_dotp, ops_rands = product_circuit_eval_verify(
        proof.proof_ops, claims_prod_circuit, claims_dotp_circuit, n, transcript
    )
    claims_mem, _, mem_rands = product_circuit_eval_verify(
        proof.proof_memory, [row.init, row.audit, col.init, col.audit], [], m, transcript
    )
    return claims_ops, claims_ops_dotp, ops_rands, claims_mem, mem_rands


# ─────────────────────────────────────────────────────────────────────
# 해시 레이어
# ─────────────────────────────────────────────────────────────────────

def _joint_opening_prove(pc_params, evals, label, joint_label, rands, values, blinds,
                         transcript, rng):
    cs = transcript.challenge_vector(label, log2(len(evals)))
    claim = combine_n_to_one(evals, cs)
    transcript.append_scalar(joint_label, claim)
    return inner_product_prove(
        pc_params, cs + list(rands), values, blinds, claim, FR(0), transcript, rng
    )


def _joint_opening_verify(pc_params, evals, label, joint_label, rands, commits, proof, transcript):
    cs = transcript.challenge_vector(label, log2(len(evals)))
    claim = combine_n_to_one(evals, cs)
    transcript.append_scalar(joint_label, claim)
    commit_claim = commit_with(pc_params.gen_1, [claim], FR(0))
    inner_product_verify(pc_params, cs + list(rands), commits, commit_claim, proof, transcript)


def _ops_evals(evals_row, evals_col, evals_val):
    evals = (
        list(evals_row.addr) + list(evals_row.read_ts)
        + list(evals_col.addr) + list(evals_col.read_ts)
        + list(evals_val)
    )
    return evals + [FR(0)] * (OPS_BLOCKS - len(evals))


def hash_layer_prove(params, enc, row_derefs, col_derefs, derefs_values, derefs_blinds,
                     ops_rands, mem_rands, transcript, rng=None):
    transcript.append_protocol_name(b"Sparse polynomial hash layer proof")

    eval_row_ops_val = [evaluate_value(d, ops_rands) for d in row_derefs]
    eval_col_ops_val = [evaluate_value(d, ops_rands) for d in col_derefs]
    evals = eval_row_ops_val + eval_col_ops_val
    evals = evals + [FR(0)] * (DEREFS_BLOCKS - len(evals))
    transcript.append_protocol_name(b"Derefs evaluation proof")
    transcript.append_scalars(b"evals_ops_val", evals)
    proof_derefs = _joint_opening_prove(
        params.derefs_params, evals, b"challenge_combine_n_to_one", b"joint_claim_eval",
        ops_rands, derefs_values, derefs_blinds, transcript, rng,
    )

    def addr_ts_evals(addr, read_ts, audit_ts):
        return AddrTimestampEvals(
            addr=tuple(evaluate_value(_as_fr(a), ops_rands) for a in addr),
            read_ts=tuple(evaluate_value(_as_fr(t), ops_rands) for t in read_ts),
            audit_ts=evaluate_value(_as_fr(audit_ts), mem_rands),
        )

    evals_row = addr_ts_evals(enc.row_addr, enc.row_read_ts, enc.row_audit_ts)
    evals_col = addr_ts_evals(enc.col_addr, enc.col_read_ts, enc.col_audit_ts)
    evals_val = tuple(evaluate_value(v, ops_rands) for v in enc.val)

    evals_ops = _ops_evals(evals_row, evals_col, evals_val)
    transcript.append_scalars(b"claim_evals_ops", evals_ops)
    proof_ops = _joint_opening_prove(
        params.ops_params, evals_ops, b"challenge_combine_n_to_one", b"joint_claim_eval_ops",
        ops_rands, enc.ops_values, enc.ops_blinds, transcript, rng,
    )

    evals_mem = [evals_row.audit_ts, evals_col.audit_ts]
    transcript.append_scalars(b"claim_evals_mem", evals_mem)
    proof_mem = _joint_opening_prove(
        params.mem_params, evals_mem, b"challenge_combine_two_to_one", b"joint_claim_eval_mem",
        mem_rands, enc.mem_values, enc.mem_blinds, transcript, rng,
    )

    return HashLayerProof(
        eval_row_ops_val=tuple(eval_row_ops_val),
        eval_col_ops_val=tuple(eval_col_ops_val),
        evals_row=evals_row,
        evals_col=evals_col,
        evals_val=evals_val,
        proof_derefs=proof_derefs,
        proof_ops=proof_ops,
        proof_mem=proof_mem,
    )


def hash_layer_verify(params, proof, rx, ry, ops_rands, mem_rands, gamma,
                      claims_row, claims_col, claims_dotp, encode_commit,
                      derefs_commit, transcript):
    transcript.append_protocol_name(b"Sparse polynomial hash layer proof")
    require_shape(len(claims_dotp) == 3 * NUM_MATRICES, "내적 주장은 9개여야 합니다")
    for name, vec in (
        ("eval_row_ops_val", proof.eval_row_ops_val),
        ("eval_col_ops_val", proof.eval_col_ops_val),
        ("evals_val", proof.evals_val),
        ("evals_row.addr", proof.evals_row.addr),
        ("evals_row.read_ts", proof.evals_row.read_ts),
        ("evals_col.addr", proof.evals_col.addr),
        ("evals_col.read_ts", proof.evals_col.read_ts),
    ):
        require_shape(len(vec) == NUM_MATRICES, f"{name} 길이는 {NUM_MATRICES}여야 합니다")

    evals = list(proof.eval_row_ops_val) + list(proof.eval_col_ops_val)
    evals = evals + [FR(0)] * (DEREFS_BLOCKS - len(evals))
    transcript.append_protocol_name(b"Derefs evaluation proof")
    transcript.append_scalars(b"evals_ops_val", evals)
    _joint_opening_verify(
        params.derefs_params, evals, b"challenge_combine_n_to_one", b"joint_claim_eval",
        ops_rands, derefs_commit, proof.proof_derefs, transcript,
    )

    for i in range(NUM_MATRICES):
        require(claims_dotp[3 * i] == proof.eval_row_ops_val[i], "deref-row")
        require(claims_dotp[3 * i + 1] == proof.eval_col_ops_val[i], "deref-col")
        require(claims_dotp[3 * i + 2] == proof.evals_val[i], "deref-val")

    evals_ops = _ops_evals(proof.evals_row, proof.evals_col, proof.evals_val)
    transcript.append_scalars(b"claim_evals_ops", evals_ops)
    _joint_opening_verify(
        params.ops_params, evals_ops, b"challenge_combine_n_to_one", b"joint_claim_eval_ops",
        ops_rands, encode_commit.ops_commit, proof.proof_ops, transcript,
    )

    evals_mem = [proof.evals_row.audit_ts, proof.evals_col.audit_ts]
    transcript.append_scalars(b"claim_evals_mem", evals_mem)
    _joint_opening_verify(
        params.mem_params, evals_mem, b"challenge_combine_two_to_one", b"joint_claim_eval_mem",
        mem_rands, encode_commit.mem_commit, proof.proof_mem, transcript,
    )

    verify_memory_hashes(
        claims_row, rx, mem_rands, proof.eval_row_ops_val,
        proof.evals_row.addr, proof.evals_row.read_ts, proof.evals_row.audit_ts, gamma,
    )
    verify_memory_hashes(
        claims_col, ry, mem_rands, proof.eval_col_ops_val,
        proof.evals_col.addr, proof.evals_col.read_ts, proof.evals_col.audit_ts, gamma,
    )


# ─────────────────────────────────────────────────────────────────────
# 진입점
# ─────────────────────────────────────────────────────────────────────

def sparse_poly_eval_prove(params, enc, rx, ry, transcript, rng=None):
    """Ã, B̃, C̃ 의 (rx, ry) 평가값이 인코딩과 일치함을 증명한다.

    Returns:
        R1CSEvalsProof
    """
    transcript.append_protocol_name(b"sparse polynomial evaluation proof")
    rx, ry = equalize_length(rx, ry)
    require_params(1 << len(rx) == enc.m, f"메모리 크기 {enc.m}가 평가 점 길이와 맞지 않습니다")

    mem_row = eval_eq(rx)
    mem_col = eval_eq(ry)
    row_derefs = [[mem_row[a] for a in addrs] for addrs in enc.row_addr]
    col_derefs = [[mem_col[a] for a in addrs] for addrs in enc.col_addr]

    derefs_values = []
    for vec in row_derefs + col_derefs:
        derefs_values.extend(vec)
    derefs_values.extend([FR(0)] * (DEREFS_BLOCKS * enc.n - len(derefs_values)))
    derefs_commit, derefs_blinds = poly_commit(params.derefs_params, derefs_values, rng=rng)
    transcript.append_points(b"comm_poly_row_col_ops_val", derefs_commit)

    gamma = tuple(transcript.challenge_vector(b"challenge_gamma_hash", 2))

    prod_layer_proof, ops_rands, mem_rands = product_layer_prove(
        enc, mem_row, mem_col, row_derefs, col_derefs, gamma, transcript
    )
    hash_layer_proof = hash_layer_prove(
        params, enc, row_derefs, col_derefs, derefs_values, derefs_blinds,
        ops_rands, mem_rands, transcript, rng,
    )
    return R1CSEvalsProof(
        derefs_commit=tuple(derefs_commit),
        prod_layer_proof=prod_layer_proof,
        hash_layer_proof=hash_layer_proof,
    )


def sparse_poly_eval_verify(params, proof, encode_commit, rx, ry, evals, transcript):
    """주장된 행렬 평가값 evals = (Ã, B̃, C̃)(rx, ry) 를 검증한다.

    Raises:
        ParameterMismatch: 파라미터나 인코딩 크기가 평가 점과 맞지 않을 때
        MalformedProof: 증명 구조가 잘못되었을 때
        CryptographicCheckFailed: 어느 검사든 실패할 때
    """
    transcript.append_protocol_name(b"sparse polynomial evaluation proof")
    rx, ry = equalize_length(rx, ry)
    n, m = encode_commit.n, encode_commit.m
    require_params(1 << len(rx) == m, f"메모리 크기 {m}가 평가 점 길이와 맞지 않습니다")
    check_eval_params(params, n, m)

    transcript.append_points(b"comm_poly_row_col_ops_val", proof.derefs_commit)
    gamma = tuple(transcript.challenge_vector(b"challenge_gamma_hash", 2))

    claims_ops, claims_ops_dotp, ops_rands, claims_mem, mem_rands = product_layer_verify(
        proof.prod_layer_proof, n, m, list(evals), transcript
    )
    claims_row = MemoryClaims(
        init=claims_mem[0],
        read=tuple(claims_ops[0:3]),
        write=tuple(claims_ops[3:6]),
        audit=claims_mem[1],
    )
    claims_col = MemoryClaims(
        init=claims_mem[2],
        read=tuple(claims_ops[6:9]),
        write=tuple(claims_ops[9:12]),
        audit=claims_mem[3],
    )
    hash_layer_verify(
        params, proof.hash_layer_proof, rx, ry, ops_rands, mem_rands, gamma,
        claims_row, claims_col, claims_ops_dotp, encode_commit,
        proof.derefs_commit, transcript,
    )

"""
Spartan 데이터 직렬화/역직렬화 헬퍼
=====================================

TinyDB에 저장하거나 HTTP로 주고받을 수 있는 형태로 Spartan 객체를 변환한다.
FR, G1, UniPoly, 설정 파라미터, EncodeCommit, NIZK/SNARK 증명 등.

표현 규칙:
  - FR 원소 → 10진수 문자열 (앞자리 0 없음, CURVE_ORDER 미만)
  - G1 점   → [x, y] 문자열 쌍, 항등원은 null
  - 구조체   → 필드 이름을 키로 하는 dict

`*_to_bytes`는 키를 정렬하고 공백 없이 JSON으로 만든 정규(canonical) 바이트를,
`*_from_bytes`는 그 역을 돌려준다. 역직렬화는 엄격하다. 비정규 숫자,
범위를 벗어난 값, 곡선 밖의 점, 키 누락/추가, 길이 오류, 정규 형식이 아닌
바이트열은 모두 MalformedProof가 된다.

사용 예시:
    >>> blob = nizk_proof_to_bytes(proof)
    >>> nizk_proof_from_bytes(blob) == proof
    True
"""

import json
import re

from py_ecc.fields import bn128_FQ as FQ

from zkp.spartan.errors import MalformedProof
from zkp.spartan.field import FR, CURVE_ORDER, FIELD_MODULUS, is_on_curve
from zkp.spartan.params import (
    MultiCommitmentSetupParameters,
    PolyCommitmentSetupParameters,
    R1CSEvalsSetupParameters,
    R1CSSatisfiedSetupParameters,
    SetupParametersWithSpark,
    SumcheckSetupParameters,
)
from zkp.spartan.polynomial import UniPoly, is_power_of_2
from zkp.spartan.proof import (
    AddrTimestampEvals,
    BulletReductionProof,
    DotProductProofLog,
    EncodeCommit,
    EqProof,
    HashLayerProof,
    KnowledgeProductCommit,
    KnowledgeProductProof,
    KnowledgeProof,
    LayerProof,
    MemoryClaims,
    NIZKProof,
    ProductCircuitEvalProof,
    ProductLayerProof,
    ProductProof,
    R1CSEvalsProof,
    R1CSSatProof,
    SNARKProof,
    SumCheckEvalProof,
    SumCheckProof,
)


_DECIMAL = re.compile(r"0|[1-9][0-9]*")


# ─── 구조 검사 헬퍼 ───

def _fields(data, name, keys):
    """dict의 키가 정확히 keys인지 확인하고 값을 keys 순서로 돌려준다."""
    if not isinstance(data, dict) or set(data) != set(keys):
        raise MalformedProof(f"{name}: 키 집합이 {sorted(keys)} 와 다릅니다")
    return [data[k] for k in keys]


def _items(data, name, length=None):
    if not isinstance(data, list):
        raise MalformedProof(f"{name}: 리스트가 아닙니다")
    if length is not None and len(data) != length:
        raise MalformedProof(f"{name}: 길이 {len(data)} != {length}")
    return data


def _decimal(data, name, bound):
    if not isinstance(data, str) or not _DECIMAL.fullmatch(data):
        raise MalformedProof(f"{name}: 정규 10진수 문자열이 아닙니다")
    value = int(data)
    if value >= bound:
        raise MalformedProof(f"{name}: 값이 범위를 벗어났습니다")
    return value


def _size(data, name):
    """2의 거듭제곱 양의 정수 (bool 제외)."""
    if isinstance(data, bool) or not isinstance(data, int) or not is_power_of_2(data):
        raise MalformedProof(f"{name}: 2의 거듭제곱 정수가 아닙니다")
    return data


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR (정규 형식, CURVE_ORDER 미만만 허용)"""
    return FR(_decimal(s, "scalar", CURVE_ORDER))


def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [serialize_fr(v) for v in lst]


def deserialize_fr_list(data, length=None):
    """list[str] → tuple[FR]"""
    return tuple(deserialize_fr(s) for s in _items(data, "scalars", length))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point (곡선 위의 점만 허용)"""
    if data is None:
        return None
    x, y = _items(data, "point", 2)
    point = (FQ(_decimal(x, "point.x", FIELD_MODULUS)), FQ(_decimal(y, "point.y", FIELD_MODULUS)))
    if not is_on_curve(point):
        raise MalformedProof("point: 곡선 위의 점이 아닙니다")
    return point


def serialize_g1_list(points):
    return [serialize_g1(p) for p in points]


def deserialize_g1_list(data, length=None):
    return tuple(deserialize_g1(p) for p in _items(data, "points", length))


# ─── UniPoly ───

def serialize_poly(poly):
    """UniPoly → list of str (계수)"""
    return serialize_fr_list(poly.coeffs)


def deserialize_poly(data):
    """list of str → UniPoly"""
    coeffs = deserialize_fr_list(data)
    if not coeffs:
        raise MalformedProof("poly: 계수가 없습니다")
    return UniPoly(coeffs)


# ─── 설정 파라미터 ───

def serialize_gens(gens):
    """MultiCommitmentSetupParameters → dict"""
    return {"generators": serialize_g1_list(gens.generators), "h": serialize_g1(gens.h)}


def deserialize_gens(data):
    generators, h = _fields(data, "gens", ["generators", "h"])
    return MultiCommitmentSetupParameters(
        generators=deserialize_g1_list(generators), h=deserialize_g1(h)
    )


def serialize_poly_commit_params(params):
    return {
        "num_vars": params.num_vars,
        "gen_n": serialize_gens(params.gen_n),
        "gen_1": serialize_gens(params.gen_1),
    }


def deserialize_poly_commit_params(data):
    num_vars, gen_n, gen_1 = _fields(data, "pc_params", ["num_vars", "gen_n", "gen_1"])
    if isinstance(num_vars, bool) or not isinstance(num_vars, int) or num_vars < 0:
        raise MalformedProof("pc_params.num_vars: 음이 아닌 정수가 아닙니다")
    return PolyCommitmentSetupParameters(
        num_vars=num_vars, gen_n=deserialize_gens(gen_n), gen_1=deserialize_gens(gen_1)
    )


def serialize_setup_params(params):
    """R1CSSatisfiedSetupParameters → dict"""
    sc = params.sc_params
    return {
        "sc_params": {
            "gen_1": serialize_gens(sc.gen_1),
            "gen_3": serialize_gens(sc.gen_3),
            "gen_4": serialize_gens(sc.gen_4),
        },
        "pc_params": serialize_poly_commit_params(params.pc_params),
    }


def deserialize_setup_params(data):
    """dict → R1CSSatisfiedSetupParameters"""
    sc, pc = _fields(data, "setup_params", ["sc_params", "pc_params"])
    gen_1, gen_3, gen_4 = _fields(sc, "sc_params", ["gen_1", "gen_3", "gen_4"])
    return R1CSSatisfiedSetupParameters(
        sc_params=SumcheckSetupParameters(
            gen_1=deserialize_gens(gen_1),
            gen_3=deserialize_gens(gen_3),
            gen_4=deserialize_gens(gen_4),
        ),
        pc_params=deserialize_poly_commit_params(pc),
    )


def serialize_spark_params(params):
    """SetupParametersWithSpark → dict"""
    evals = params.r1cs_eval_params
    return {
        "r1cs_satisfied_params": serialize_setup_params(params.r1cs_satisfied_params),
        "r1cs_eval_params": {
            "ops_params": serialize_poly_commit_params(evals.ops_params),
            "mem_params": serialize_poly_commit_params(evals.mem_params),
            "derefs_params": serialize_poly_commit_params(evals.derefs_params),
        },
    }


def deserialize_spark_params(data):
    """dict → SetupParametersWithSpark"""
    sat, evals = _fields(data, "spark_params", ["r1cs_satisfied_params", "r1cs_eval_params"])
    ops, mem, derefs = _fields(evals, "r1cs_eval_params", ["ops_params", "mem_params", "derefs_params"])
    return SetupParametersWithSpark(
        r1cs_satisfied_params=deserialize_setup_params(sat),
        r1cs_eval_params=R1CSEvalsSetupParameters(
            ops_params=deserialize_poly_commit_params(ops),
            mem_params=deserialize_poly_commit_params(mem),
            derefs_params=deserialize_poly_commit_params(derefs),
        ),
    )


# ─── EncodeCommit ───

def serialize_encode_commit(commit):
    return {
        "n": commit.n,
        "m": commit.m,
        "ops_commit": serialize_g1_list(commit.ops_commit),
        "mem_commit": serialize_g1_list(commit.mem_commit),
    }


def deserialize_encode_commit(data):
    n, m, ops_commit, mem_commit = _fields(data, "encode_commit", ["n", "m", "ops_commit", "mem_commit"])
    return EncodeCommit(
        n=_size(n, "encode_commit.n"),
        m=_size(m, "encode_commit.m"),
        ops_commit=deserialize_g1_list(ops_commit),
        mem_commit=deserialize_g1_list(mem_commit),
    )


# ─── 시그마 / 내적 증명 ───

def serialize_knowledge_proof(proof):
    return {
        "t_commit": serialize_g1(proof.t_commit),
        "z1": serialize_fr(proof.z1),
        "z2": serialize_fr(proof.z2),
    }


def deserialize_knowledge_proof(data):
    t_commit, z1, z2 = _fields(data, "knowledge_proof", ["t_commit", "z1", "z2"])
    return KnowledgeProof(
        t_commit=deserialize_g1(t_commit), z1=deserialize_fr(z1), z2=deserialize_fr(z2)
    )


def serialize_product_proof(proof):
    return {
        "commit_alpha": serialize_g1(proof.commit_alpha),
        "commit_beta": serialize_g1(proof.commit_beta),
        "commit_delta": serialize_g1(proof.commit_delta),
        "z": serialize_fr_list(proof.z),
    }


def deserialize_product_proof(data):
    alpha, beta, delta, z = _fields(
        data, "product_proof", ["commit_alpha", "commit_beta", "commit_delta", "z"]
    )
    return ProductProof(
        commit_alpha=deserialize_g1(alpha),
        commit_beta=deserialize_g1(beta),
        commit_delta=deserialize_g1(delta),
        z=deserialize_fr_list(z, 5),
    )


def serialize_eq_proof(proof):
    return {"alpha": serialize_g1(proof.alpha), "z": serialize_fr(proof.z)}


def deserialize_eq_proof(data):
    alpha, z = _fields(data, "eq_proof", ["alpha", "z"])
    return EqProof(alpha=deserialize_g1(alpha), z=deserialize_fr(z))


def serialize_dot_product_proof(proof):
    """DotProductProofLog → dict"""
    bullet = proof.inner_product_proof
    return {
        "inner_product_proof": {
            "l_vec": serialize_g1_list(bullet.l_vec),
            "r_vec": serialize_g1_list(bullet.r_vec),
        },
        "delta": serialize_g1(proof.delta),
        "beta": serialize_g1(proof.beta),
        "z1": serialize_fr(proof.z1),
        "z2": serialize_fr(proof.z2),
    }


def deserialize_dot_product_proof(data):
    bullet, delta, beta, z1, z2 = _fields(
        data, "dot_product_proof", ["inner_product_proof", "delta", "beta", "z1", "z2"]
    )
    l_vec, r_vec = _fields(bullet, "inner_product_proof", ["l_vec", "r_vec"])
    l_vec = deserialize_g1_list(l_vec)
    return DotProductProofLog(
        inner_product_proof=BulletReductionProof(
            l_vec=l_vec, r_vec=deserialize_g1_list(r_vec, len(l_vec))
        ),
        delta=deserialize_g1(delta),
        beta=deserialize_g1(beta),
        z1=deserialize_fr(z1),
        z2=deserialize_fr(z2),
    )


# ─── 합검사 ───

def serialize_sumcheck_proof(proof):
    return {
        "comm_polys": serialize_g1_list(proof.comm_polys),
        "comm_evals": serialize_g1_list(proof.comm_evals),
        "proofs": [
            {
                "d_commit": serialize_g1(p.d_commit),
                "dot_cd_commit": serialize_g1(p.dot_cd_commit),
                "z": serialize_fr_list(p.z),
                "z_delta": serialize_fr(p.z_delta),
                "z_beta": serialize_fr(p.z_beta),
            }
            for p in proof.proofs
        ],
    }


def _deserialize_sumcheck_eval_proof(data):
    d_commit, dot_cd_commit, z, z_delta, z_beta = _fields(
        data, "sumcheck_eval_proof", ["d_commit", "dot_cd_commit", "z", "z_delta", "z_beta"]
    )
    return SumCheckEvalProof(
        d_commit=deserialize_g1(d_commit),
        dot_cd_commit=deserialize_g1(dot_cd_commit),
        z=deserialize_fr_list(z),
        z_delta=deserialize_fr(z_delta),
        z_beta=deserialize_fr(z_beta),
    )


def deserialize_sumcheck_proof(data):
    comm_polys, comm_evals, proofs = _fields(
        data, "sumcheck_proof", ["comm_polys", "comm_evals", "proofs"]
    )
    comm_polys = deserialize_g1_list(comm_polys)
    rounds = len(comm_polys)
    return SumCheckProof(
        comm_polys=comm_polys,
        comm_evals=deserialize_g1_list(comm_evals, rounds),
        proofs=tuple(
            _deserialize_sumcheck_eval_proof(p) for p in _items(proofs, "sumcheck.proofs", rounds)
        ),
    )


# ─── R1CS 만족 증명 ───

def serialize_r1cs_sat_proof(proof):
    kp_commit = proof.knowledge_product_commit
    return {
        "commit_witness": serialize_g1_list(proof.commit_witness),
        "proof_one": serialize_sumcheck_proof(proof.proof_one),
        "knowledge_product_commit": {
            "va_commit": serialize_g1(kp_commit.va_commit),
            "vb_commit": serialize_g1(kp_commit.vb_commit),
            "vc_commit": serialize_g1(kp_commit.vc_commit),
            "prod_commit": serialize_g1(kp_commit.prod_commit),
        },
        "knowledge_product_proof": {
            "knowledge_proof": serialize_knowledge_proof(proof.knowledge_product_proof.knowledge_proof),
            "product_proof": serialize_product_proof(proof.knowledge_product_proof.product_proof),
        },
        "sc1_eq_proof": serialize_eq_proof(proof.sc1_eq_proof),
        "proof_two": serialize_sumcheck_proof(proof.proof_two),
        "commit_ry": serialize_g1(proof.commit_ry),
        "product_proof": serialize_dot_product_proof(proof.product_proof),
        "sc2_eq_proof": serialize_eq_proof(proof.sc2_eq_proof),
    }


def deserialize_r1cs_sat_proof(data):
    keys = [
        "commit_witness", "proof_one", "knowledge_product_commit", "knowledge_product_proof",
        "sc1_eq_proof", "proof_two", "commit_ry", "product_proof", "sc2_eq_proof",
    ]
    (commit_witness, proof_one, kp_commit, kp_proof,
     sc1_eq, proof_two, commit_ry, product_proof, sc2_eq) = _fields(data, "r1cs_sat_proof", keys)
    va, vb, vc, prod = _fields(
        kp_commit, "knowledge_product_commit", ["va_commit", "vb_commit", "vc_commit", "prod_commit"]
    )
    knowledge, product = _fields(
        kp_proof, "knowledge_product_proof", ["knowledge_proof", "product_proof"]
    )
    return R1CSSatProof(
        commit_witness=deserialize_g1_list(commit_witness),
        proof_one=deserialize_sumcheck_proof(proof_one),
        knowledge_product_commit=KnowledgeProductCommit(
            va_commit=deserialize_g1(va),
            vb_commit=deserialize_g1(vb),
            vc_commit=deserialize_g1(vc),
            prod_commit=deserialize_g1(prod),
        ),
        knowledge_product_proof=KnowledgeProductProof(
            knowledge_proof=deserialize_knowledge_proof(knowledge),
            product_proof=deserialize_product_proof(product),
        ),
        sc1_eq_proof=deserialize_eq_proof(sc1_eq),
        proof_two=deserialize_sumcheck_proof(proof_two),
        commit_ry=deserialize_g1(commit_ry),
        product_proof=deserialize_dot_product_proof(product_proof),
        sc2_eq_proof=deserialize_eq_proof(sc2_eq),
    )


# ─── 곱 회로 / 희소 평가 ───

def serialize_memory_claims(claims):
    return {
        "init": serialize_fr(claims.init),
        "read": serialize_fr_list(claims.read),
        "write": serialize_fr_list(claims.write),
        "audit": serialize_fr(claims.audit),
    }


def deserialize_memory_claims(data):
    init, read, write, audit = _fields(data, "memory_claims", ["init", "read", "write", "audit"])
    read = deserialize_fr_list(read)
    return MemoryClaims(
        init=deserialize_fr(init),
        read=read,
        write=deserialize_fr_list(write, len(read)),
        audit=deserialize_fr(audit),
    )


def serialize_product_circuit_proof(proof):
    return {
        "layers_proof": [
            {
                "polys": [serialize_poly(p) for p in layer.polys],
                "claim_prod_left": serialize_fr_list(layer.claim_prod_left),
                "claim_prod_right": serialize_fr_list(layer.claim_prod_right),
            }
            for layer in proof.layers_proof
        ],
        "claim_dotp_row": serialize_fr_list(proof.claim_dotp_row),
        "claim_dotp_col": serialize_fr_list(proof.claim_dotp_col),
        "claim_dotp_val": serialize_fr_list(proof.claim_dotp_val),
    }


def _deserialize_layer_proof(data):
    polys, left, right = _fields(data, "layer_proof", ["polys", "claim_prod_left", "claim_prod_right"])
    left = deserialize_fr_list(left)
    return LayerProof(
        polys=tuple(deserialize_poly(p) for p in _items(polys, "layer.polys")),
        claim_prod_left=left,
        claim_prod_right=deserialize_fr_list(right, len(left)),
    )


def deserialize_product_circuit_proof(data):
    layers, row, col, val = _fields(
        data, "product_circuit_proof",
        ["layers_proof", "claim_dotp_row", "claim_dotp_col", "claim_dotp_val"],
    )
    row = deserialize_fr_list(row)
    return ProductCircuitEvalProof(
        layers_proof=tuple(_deserialize_layer_proof(l) for l in _items(layers, "layers_proof")),
        claim_dotp_row=row,
        claim_dotp_col=deserialize_fr_list(col, len(row)),
        claim_dotp_val=deserialize_fr_list(val, len(row)),
    )


def _serialize_addr_ts_evals(evals):
    return {
        "addr": serialize_fr_list(evals.addr),
        "read_ts": serialize_fr_list(evals.read_ts),
        "audit_ts": serialize_fr(evals.audit_ts),
    }


def _deserialize_addr_ts_evals(data):
    addr, read_ts, audit_ts = _fields(data, "addr_ts_evals", ["addr", "read_ts", "audit_ts"])
    addr = deserialize_fr_list(addr)
    return AddrTimestampEvals(
        addr=addr,
        read_ts=deserialize_fr_list(read_ts, len(addr)),
        audit_ts=deserialize_fr(audit_ts),
    )


def serialize_r1cs_evals_proof(proof):
    prod = proof.prod_layer_proof
    hash_ = proof.hash_layer_proof
    return {
        "derefs_commit": serialize_g1_list(proof.derefs_commit),
        "prod_layer_proof": {
            "eval_row": serialize_memory_claims(prod.eval_row),
            "eval_col": serialize_memory_claims(prod.eval_col),
            "eval_dotp_left": serialize_fr_list(prod.eval_dotp_left),
            "eval_dotp_right": serialize_fr_list(prod.eval_dotp_right),
            "proof_memory": serialize_product_circuit_proof(prod.proof_memory),
            "proof_ops": serialize_product_circuit_proof(prod.proof_ops),
        },
        "hash_layer_proof": {
            "eval_row_ops_val": serialize_fr_list(hash_.eval_row_ops_val),
            "eval_col_ops_val": serialize_fr_list(hash_.eval_col_ops_val),
            "evals_row": _serialize_addr_ts_evals(hash_.evals_row),
            "evals_col": _serialize_addr_ts_evals(hash_.evals_col),
            "evals_val": serialize_fr_list(hash_.evals_val),
            "proof_derefs": serialize_dot_product_proof(hash_.proof_derefs),
            "proof_ops": serialize_dot_product_proof(hash_.proof_ops),
            "proof_mem": serialize_dot_product_proof(hash_.proof_mem),
        },
    }


def deserialize_r1cs_evals_proof(data):
    derefs_commit, prod, hash_ = _fields(
        data, "r1cs_evals_proof", ["derefs_commit", "prod_layer_proof", "hash_layer_proof"]
    )
    (eval_row, eval_col, dotp_left, dotp_right, proof_memory, proof_ops) = _fields(
        prod, "prod_layer_proof",
        ["eval_row", "eval_col", "eval_dotp_left", "eval_dotp_right", "proof_memory", "proof_ops"],
    )
    (row_ops_val, col_ops_val, evals_row, evals_col, evals_val,
     proof_derefs, hash_ops, hash_mem) = _fields(
        hash_, "hash_layer_proof",
        ["eval_row_ops_val", "eval_col_ops_val", "evals_row", "evals_col", "evals_val",
         "proof_derefs", "proof_ops", "proof_mem"],
    )
    dotp_left = deserialize_fr_list(dotp_left)
    row_ops_val = deserialize_fr_list(row_ops_val)
    return R1CSEvalsProof(
        derefs_commit=deserialize_g1_list(derefs_commit),
        prod_layer_proof=ProductLayerProof(
            eval_row=deserialize_memory_claims(eval_row),
            eval_col=deserialize_memory_claims(eval_col),
            eval_dotp_left=dotp_left,
            eval_dotp_right=deserialize_fr_list(dotp_right, len(dotp_left)),
            proof_memory=deserialize_product_circuit_proof(proof_memory),
            proof_ops=deserialize_product_circuit_proof(proof_ops),
        ),
        hash_layer_proof=HashLayerProof(
            eval_row_ops_val=row_ops_val,
            eval_col_ops_val=deserialize_fr_list(col_ops_val, len(row_ops_val)),
            evals_row=_deserialize_addr_ts_evals(evals_row),
            evals_col=_deserialize_addr_ts_evals(evals_col),
            evals_val=deserialize_fr_list(evals_val),
            proof_derefs=deserialize_dot_product_proof(proof_derefs),
            proof_ops=deserialize_dot_product_proof(hash_ops),
            proof_mem=deserialize_dot_product_proof(hash_mem),
        ),
    )


# ─── 최상위 증명 ───

def serialize_nizk_proof(proof):
    """NIZKProof → dict"""
    return {
        "r1cs_satisfied_proof": serialize_r1cs_sat_proof(proof.r1cs_satisfied_proof),
        "rx": serialize_fr_list(proof.rx),
        "ry": serialize_fr_list(proof.ry),
    }


def deserialize_nizk_proof(data):
    """dict → NIZKProof"""
    sat, rx, ry = _fields(data, "nizk_proof", ["r1cs_satisfied_proof", "rx", "ry"])
    return NIZKProof(
        r1cs_satisfied_proof=deserialize_r1cs_sat_proof(sat),
        rx=deserialize_fr_list(rx),
        ry=deserialize_fr_list(ry),
    )


def serialize_snark_proof(proof):
    """SNARKProof → dict"""
    return {
        "r1cs_satisfied_proof": serialize_r1cs_sat_proof(proof.r1cs_satisfied_proof),
        "matrix_evals": serialize_fr_list(proof.matrix_evals),
        "r1cs_evals_proof": serialize_r1cs_evals_proof(proof.r1cs_evals_proof),
    }


def deserialize_snark_proof(data):
    """dict → SNARKProof"""
    sat, matrix_evals, evals_proof = _fields(
        data, "snark_proof", ["r1cs_satisfied_proof", "matrix_evals", "r1cs_evals_proof"]
    )
    return SNARKProof(
        r1cs_satisfied_proof=deserialize_r1cs_sat_proof(sat),
        matrix_evals=deserialize_fr_list(matrix_evals, 3),
        r1cs_evals_proof=deserialize_r1cs_evals_proof(evals_proof),
    )


# ─── 정규 바이트 표현 ───

def to_bytes(data):
    """JSON 호환 dict → 정규 바이트 (키 정렬, 공백 없음)"""
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def from_bytes(blob):
    """정규 바이트 → dict

    Raises:
        MalformedProof: UTF-8/JSON 오류이거나 정규 형식이 아닐 때
    """
    try:
        data = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as err:
        raise MalformedProof(f"JSON 디코딩 실패: {err}") from err
    if to_bytes(data) != bytes(blob):
        raise MalformedProof("정규(canonical) 인코딩이 아닙니다")
    return data


def nizk_proof_to_bytes(proof):
    return to_bytes(serialize_nizk_proof(proof))


def nizk_proof_from_bytes(blob):
    return deserialize_nizk_proof(from_bytes(blob))


def snark_proof_to_bytes(proof):
    return to_bytes(serialize_snark_proof(proof))


def snark_proof_from_bytes(blob):
    return deserialize_snark_proof(from_bytes(blob))


def setup_params_to_bytes(params):
    return to_bytes(serialize_setup_params(params))


def setup_params_from_bytes(blob):
    return deserialize_setup_params(from_bytes(blob))


def spark_params_to_bytes(params):
    return to_bytes(serialize_spark_params(params))


def spark_params_from_bytes(blob):
    return deserialize_spark_params(from_bytes(blob))


def encode_commit_to_bytes(commit):
    return to_bytes(serialize_encode_commit(commit))


def encode_commit_from_bytes(blob):
    return deserialize_encode_commit(from_bytes(blob))


# ─── 표시 헬퍼 ───

def g1_short(point):
    """G1 point → 축약 문자열 (응답 표시용)"""
    if point is None:
        return "∞"
    return f"({_shorten(str(int(point[0])))}, {_shorten(str(int(point[1])))})"


def fr_short(val):
    """FR → 축약 문자열 (응답 표시용)"""
    if val is None:
        return "None"
    return _shorten(str(int(val)), 10)


def _shorten(s, limit=8):
    if len(s) <= limit:
        return s
    return s[:4] + "..." + s[-4:]

"""
Spartan Flask Blueprint: 설정 / 증명 / 검증 엔드포인트
==========================================================

    POST /spartan/setup   {scheme, circuit, num_constraints?, num_variables?}
    POST /spartan/prove   {scheme, circuit, witness}
    POST /spartan/verify  {scheme, circuit, public_inputs?}
    GET  /spartan/state

scheme은 "nizk" 또는 "snark", circuit은 "multiply" 또는 "mini".
모든 산출물은 SpartanStore에 직렬화된 dict로 저장된다.
잘못된 요청은 400과 {"error": ...} JSON으로 응답한다.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from zkp.spartan.circuits import build_circuit
from zkp.spartan.errors import SpartanError
from zkp.spartan import nizk, snark

from spartan_serializers import (
    deserialize_nizk_proof,
    deserialize_setup_params,
    deserialize_snark_proof,
    deserialize_spark_params,
    deserialize_encode_commit,
    serialize_encode_commit,
    serialize_fr_list,
    serialize_nizk_proof,
    serialize_setup_params,
    serialize_snark_proof,
    serialize_spark_params,
    fr_short,
    g1_short,
)

logger = logging.getLogger(__name__)

spartan_bp = Blueprint('spartan', __name__, url_prefix='/spartan')

# STORE는 app.py에서 주입
STORE = None

SCHEMES = ("nizk", "snark")
CIRCUIT_NAMES = ("multiply", "mini")


def init_spartan_bp(store):
    """app.py에서 저장소를 주입받는다."""
    global STORE
    STORE = store


class RequestError(Exception):
    """400으로 응답할 요청 오류."""


@spartan_bp.errorhandler(RequestError)
@spartan_bp.errorhandler(SpartanError)
def handle_request_error(err):
    logger.info(f"Rejected request: {err}")
    return jsonify({"error": str(err)}), 400


# ─── 요청 파싱 헬퍼 ───

def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestError("JSON 객체 본문이 필요합니다")
    return data


def _scheme_and_circuit(data):
    scheme = data.get("scheme")
    circuit = data.get("circuit")
    if scheme not in SCHEMES:
        raise RequestError(f"scheme은 {SCHEMES} 중 하나여야 합니다")
    if circuit not in CIRCUIT_NAMES:
        raise RequestError(f"circuit은 {CIRCUIT_NAMES} 중 하나여야 합니다")
    return scheme, circuit


def _parse_int(value, name):
    if isinstance(value, bool):
        raise RequestError(f"{name}: 정수가 필요합니다")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    raise RequestError(f"{name}: 정수가 필요합니다")


def _circuit_sizes(data, circuit):
    if circuit != "multiply":
        return {}
    sizes = {
        "num_constraints": _parse_int(data.get("num_constraints", 6), "num_constraints"),
        "num_variables": _parse_int(data.get("num_variables", 11), "num_variables"),
    }
    if sizes["num_constraints"] < 1 or sizes["num_variables"] < 3:
        raise RequestError("num_constraints ≥ 1, num_variables ≥ 3 이어야 합니다")
    return sizes


def _key(scheme, circuit, name):
    return f"spartan.{scheme}.{circuit}.{name}"


def _load_params(scheme, circuit):
    data = STORE.get(_key(scheme, circuit, "params"))
    if data is None:
        raise RequestError(f"{scheme}/{circuit} 설정이 없습니다. 먼저 /spartan/setup 을 호출하세요")
    if scheme == "nizk":
        return deserialize_setup_params(data)
    return deserialize_spark_params(data)


def _instance(circuit, sizes, witness=None):
    return build_circuit(circuit, witness, **sizes)


# ──────────────────────────────────────────────────────────────
# Setup
# ──────────────────────────────────────────────────────────────

@spartan_bp.route("/setup", methods=["POST"])
def setup():
    """예제 회로의 인스턴스를 합성하고 파라미터(SNARK는 인덱스까지)를 저장한다."""
    data = _payload()
    scheme, circuit = _scheme_and_circuit(data)
    sizes = _circuit_sizes(data, circuit)
    label = current_app.config["SPARTAN_SETUP_LABEL"].encode("utf-8")

    instance = _instance(circuit, sizes).to_instance()
    STORE.remove_prefix(f"spartan.{scheme}.{circuit}.")
    STORE.put(_key(scheme, circuit, "sizes"), sizes)

    response = {
        "scheme": scheme,
        "circuit": circuit,
        "num_constraints": instance.num_constraints,
        "num_vars": instance.num_vars,
        "num_inputs": instance.num_inputs,
        "num_nz_entries": instance.num_nz_entries,
    }
    if scheme == "nizk":
        params = nizk.generate_parameters(instance, label)
        STORE.put(_key(scheme, circuit, "params"), serialize_setup_params(params))
    else:
        params = snark.generate_parameters(instance, label)
        _, encode_commit = snark.encode(params, instance)
        STORE.put(_key(scheme, circuit, "params"), serialize_spark_params(params))
        STORE.put(_key(scheme, circuit, "encode_commit"), serialize_encode_commit(encode_commit))
        response["encode_commit"] = {
            "n": encode_commit.n,
            "m": encode_commit.m,
            "ops_commit": [g1_short(p) for p in encode_commit.ops_commit],
            "mem_commit": [g1_short(p) for p in encode_commit.mem_commit],
        }
    return jsonify(response)


# ──────────────────────────────────────────────────────────────
# Proving
# ──────────────────────────────────────────────────────────────

@spartan_bp.route("/prove", methods=["POST"])
def prove():
    """저장된 파라미터로 증명을 만들어 저장하고 공개 입력을 돌려준다."""
    data = _payload()
    scheme, circuit = _scheme_and_circuit(data)
    params = _load_params(scheme, circuit)
    sizes = STORE.get(_key(scheme, circuit, "sizes")) or {}

    witness = data.get("witness")
    if not isinstance(witness, dict):
        raise RequestError("witness 객체가 필요합니다")
    witness = {name: _parse_int(value, f"witness.{name}") for name, value in witness.items()}

    cs = _instance(circuit, sizes, witness)
    instance = cs.to_instance()
    assignment = cs.assignment()
    if not assignment.is_satisfied(instance):
        raise RequestError("witness가 회로를 만족하지 않습니다")

    if scheme == "nizk":
        proof = nizk.create_proof(params, instance, assignment)
        STORE.put(_key(scheme, circuit, "proof"), serialize_nizk_proof(proof))
    else:
        enc, _ = snark.encode(params, instance)
        proof = snark.create_proof(params, instance, assignment, enc)
        STORE.put(_key(scheme, circuit, "proof"), serialize_snark_proof(proof))

    public_inputs = serialize_fr_list(assignment.inputs)
    STORE.put(_key(scheme, circuit, "public_inputs"), public_inputs)
    return jsonify({
        "scheme": scheme,
        "circuit": circuit,
        "public_inputs": public_inputs,
        "commit_witness": [
            g1_short(p) for p in proof.r1cs_satisfied_proof.commit_witness
        ],
    })


# ──────────────────────────────────────────────────────────────
# Verifying
# ──────────────────────────────────────────────────────────────

@spartan_bp.route("/verify", methods=["POST"])
def verify():
    """저장된 증명을 주어진 (또는 저장된) 공개 입력으로 검증한다."""
    data = _payload()
    scheme, circuit = _scheme_and_circuit(data)
    params = _load_params(scheme, circuit)
    sizes = STORE.get(_key(scheme, circuit, "sizes")) or {}

    proof_data = STORE.get(_key(scheme, circuit, "proof"))
    if proof_data is None:
        raise RequestError("저장된 증명이 없습니다. 먼저 /spartan/prove 를 호출하세요")

    public_inputs = data.get("public_inputs")
    if public_inputs is None:
        public_inputs = STORE.get(_key(scheme, circuit, "public_inputs"))
    if not isinstance(public_inputs, list):
        raise RequestError("public_inputs 리스트가 필요합니다")
    inputs = [_parse_int(v, "public_inputs") for v in public_inputs]

    instance = _instance(circuit, sizes).to_instance()
    if scheme == "nizk":
        proof = deserialize_nizk_proof(proof_data)
        verified = nizk.nizk_verify(params, instance, inputs, proof)
    else:
        proof = deserialize_snark_proof(proof_data)
        encode_commit = deserialize_encode_commit(STORE.get(_key(scheme, circuit, "encode_commit")))
        verified = snark.snark_verify(params, instance, inputs, proof, encode_commit)

    logger.info(f"{scheme}/{circuit} verification: {verified}")
    return jsonify({
        "scheme": scheme,
        "circuit": circuit,
        "public_inputs": [fr_short(v) for v in inputs],
        "verified": verified,
    })


@spartan_bp.route("/state", methods=["GET"])
def state():
    """저장된 산출물 키 목록."""
    return jsonify({"keys": STORE.keys()})

"""
Spartan Flask 엔드포인트 테스트
=================================

메모리 TinyDB로 앱을 만들고 setup → prove → verify 흐름을 mini 회로
(x · (y + 2) = z) 로 확인한다.
"""

import pytest

from app import create_app


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SPARTAN_DB_PATH": None})


@pytest.fixture
def client(app):
    return app.test_client()


def _post(client, path, body):
    return client.post(f"/spartan/{path}", json=body)


@pytest.mark.parametrize("scheme", ["nizk", "snark"])
class TestFlow:
    def test_setup_prove_verify(self, client, scheme):
        body = {"scheme": scheme, "circuit": "mini"}

        res = _post(client, "setup", body)
        assert res.status_code == 200
        assert res.get_json()["num_inputs"] == 1

        res = _post(client, "prove", dict(body, witness={"x": 3, "y": "4"}))
        assert res.status_code == 200
        assert res.get_json()["public_inputs"] == ["18"]

        res = _post(client, "verify", body)
        assert res.status_code == 200
        assert res.get_json()["verified"] is True

        res = _post(client, "verify", dict(body, public_inputs=["17"]))
        assert res.status_code == 200
        assert res.get_json()["verified"] is False

    def test_state_lists_artifacts(self, client, scheme):
        body = {"scheme": scheme, "circuit": "mini"}
        _post(client, "setup", body)
        _post(client, "prove", dict(body, witness={"x": 1, "y": 1}))
        keys = client.get("/spartan/state").get_json()["keys"]
        prefix = f"spartan.{scheme}.mini."
        expected = {prefix + name for name in ("sizes", "params", "proof", "public_inputs")}
        if scheme == "snark":
            expected.add(prefix + "encode_commit")
        assert set(keys) == expected

    def test_setup_again_drops_old_proof(self, client, scheme):
        body = {"scheme": scheme, "circuit": "mini"}
        _post(client, "setup", body)
        _post(client, "prove", dict(body, witness={"x": 2, "y": 2}))
        _post(client, "setup", body)
        res = _post(client, "verify", body)
        assert res.status_code == 400


class TestMultiplyCircuit:
    def test_custom_sizes(self, client):
        body = {"scheme": "nizk", "circuit": "multiply", "num_constraints": 2, "num_variables": 3}
        res = _post(client, "setup", body)
        assert res.status_code == 200
        assert res.get_json()["num_constraints"] == 2

        res = _post(client, "prove", dict(body, witness={"a": 3, "b": 5}))
        assert res.get_json()["public_inputs"] == ["15"]
        assert _post(client, "verify", body).get_json()["verified"] is True

    def test_invalid_sizes(self, client):
        res = _post(client, "setup", {"scheme": "nizk", "circuit": "multiply", "num_constraints": 0})
        assert res.status_code == 400


class TestBadRequests:
    def test_unknown_scheme(self, client):
        res = _post(client, "setup", {"scheme": "groth16", "circuit": "mini"})
        assert res.status_code == 400
        assert "scheme" in res.get_json()["error"]

    def test_unknown_circuit(self, client):
        res = _post(client, "setup", {"scheme": "nizk", "circuit": "cubic"})
        assert res.status_code == 400

    def test_not_json(self, client):
        res = client.post("/spartan/setup", data="scheme=nizk")
        assert res.status_code == 400

    def test_prove_before_setup(self, client):
        res = _post(client, "prove", {"scheme": "nizk", "circuit": "mini", "witness": {"x": 1, "y": 1}})
        assert res.status_code == 400

    def test_missing_witness_value(self, client):
        _post(client, "setup", {"scheme": "nizk", "circuit": "mini"})
        res = _post(client, "prove", {"scheme": "nizk", "circuit": "mini", "witness": {"x": 1}})
        assert res.status_code == 400

    def test_non_integer_witness(self, client):
        _post(client, "setup", {"scheme": "nizk", "circuit": "mini"})
        res = _post(client, "prove", {"scheme": "nizk", "circuit": "mini", "witness": {"x": "abc", "y": 1}})
        assert res.status_code == 400

    def test_wrong_input_count(self, client):
        body = {"scheme": "nizk", "circuit": "mini"}
        _post(client, "setup", body)
        _post(client, "prove", dict(body, witness={"x": 1, "y": 1}))
        res = _post(client, "verify", dict(body, public_inputs=["3", "4"]))
        assert res.status_code == 400


class TestConfig:
    def test_defaults(self, app):
        assert app.config["SPARTAN_SETUP_LABEL"] == "spartan"
        assert "spartan_store" in app.extensions

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SPARTAN_SETUP_LABEL", "from-env")
        app = create_app({"SPARTAN_SETUP_LABEL": "from-arg"})
        assert app.config["SPARTAN_SETUP_LABEL"] == "from-env"

    def test_file_store(self, tmp_path):
        path = str(tmp_path / "db.json")
        client = create_app({"SPARTAN_DB_PATH": path}).test_client()
        _post(client, "setup", {"scheme": "nizk", "circuit": "mini"})
        reopened = create_app({"SPARTAN_DB_PATH": path})
        assert "spartan.nizk.mini.params" in reopened.extensions["spartan_store"].keys()

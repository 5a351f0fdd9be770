"""
Spartan 웹 애플리케이션
========================

Flask 애플리케이션 팩토리. spartan 블루프린트를 등록하고 TinyDB 저장소를
주입한다.

설정 (우선순위: 환경 변수 > create_app 인자 > 기본값):
    SPARTAN_DB_PATH      TinyDB 파일 경로 (None이면 메모리 DB)
    SPARTAN_SETUP_LABEL  생성자 도출 도메인 레이블
    TESTING              Flask 테스트 모드

실행:
    flask --app app run
    SPARTAN_DB_PATH=db.json python app.py
"""

import logging
import os

from flask import Flask

from zkp.spartan.params import DEFAULT_SETUP_LABEL

from spartan_routes import spartan_bp, init_spartan_bp
from spartan_store import SpartanStore


DEFAULT_CONFIG = {
    "SPARTAN_DB_PATH": None,
    "SPARTAN_SETUP_LABEL": DEFAULT_SETUP_LABEL.decode("utf-8"),
    "TESTING": False,
}

ENV_PREFIX = "SPARTAN_"


def create_app(config=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    if config:
        app.config.update(config)
    for name, value in os.environ.items():
        if name.startswith(ENV_PREFIX):
            app.config[name] = value

    store = SpartanStore(app.config["SPARTAN_DB_PATH"])
    app.extensions["spartan_store"] = store
    init_spartan_bp(store)
    app.register_blueprint(spartan_bp)

    logging.getLogger(__name__).info(
        f"Spartan app ready (label={app.config['SPARTAN_SETUP_LABEL']!r})"
    )
    return app


if __name__ == "__main__":
    create_app().run(debug=True)

"""
Spartan 산출물 저장소
======================

설정 파라미터, 인덱스 커밋먼트(EncodeCommit), 증명을 TinyDB에 저장한다.
레코드는 {"type": key, "data": ...} 형태이며 같은 key로 다시 저장하면
덮어쓴다 (upsert).

키 규칙 (routes에서 사용):
    spartan.<scheme>.<circuit>.params
    spartan.<scheme>.<circuit>.encode_commit
    spartan.<scheme>.<circuit>.proof
    spartan.<scheme>.<circuit>.public_inputs
"""

import logging

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage


logger = logging.getLogger(__name__)

DATA = Query()


class SpartanStore:
    """TinyDB 테이블 하나를 감싼 key-value 저장소.

    Args:
        path: JSON 파일 경로. None이면 메모리 DB.
        table: 테이블 이름
    """

    def __init__(self, path=None, table="spartan"):
        if path is None:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(path)
        self.table = self.db.table(table)
        logger.info(f"Spartan store opened: {path or 'memory'} (table={table})")

    def get(self, key):
        """키로 데이터를 조회한다. 없으면 None."""
        result = self.table.search(DATA.type == key)
        if not result:
            return None
        return result[0].get("data")

    def put(self, key, data):
        self.table.upsert({"type": key, "data": data}, DATA.type == key)
        logger.debug(f"Stored {key}")

    def remove(self, key):
        self.table.remove(DATA.type == key)

    def remove_prefix(self, prefix):
        """prefix로 시작하는 모든 키를 삭제한다."""
        self.table.remove(DATA.type.test(lambda t: t.startswith(prefix)))

    def keys(self):
        return sorted(row["type"] for row in self.table.all())

    def clear(self):
        self.table.truncate()

    def close(self):
        self.db.close()

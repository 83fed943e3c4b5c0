# conftest.py
"""
pytest 공용 픽스처

실제 Firestore 대신 메모리 기반 테스트 더블을 주입합니다.
서비스가 사용하는 API(collection/document/where/order_by/limit/stream/batch)만 흉내냅니다.
"""

import copy
import uuid
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore

from catcare import create_app


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.collections.setdefault(self._collection, {})

    def get(self):
        self._db.check_available()
        self._db.reads.append((self._collection, self.id))
        return FakeSnapshot(self, copy.deepcopy(self._docs.get(self.id)))

    def set(self, data):
        self._db.check_available()
        self._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        self._db.check_available()
        if self.id not in self._docs:
            raise KeyError(f"No document to update: {self._collection}/{self.id}")
        self._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._db.check_available()
        if self.id in self._db.fail_deletes:
            raise ConnectionError(f"simulated delete failure for {self.id}")
        self._docs.pop(self.id, None)
        self._db.deleted.append((self._collection, self.id))


class FakeQuery:
    def __init__(self, db, collection, filters=(), orders=(), limit_n=None):
        self._db = db
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._limit = limit_n

    def where(self, field, op, value):
        assert op == '==', f"unsupported operator in test double: {op}"
        return FakeQuery(self._db, self._collection, self._filters + ((field, value),), self._orders, self._limit)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self._db, self._collection, self._filters, self._orders + ((field, direction),), self._limit)

    def limit(self, count):
        return FakeQuery(self._db, self._collection, self._filters, self._orders, count)

    def stream(self):
        self._db.check_available()
        docs = self._db.collections.get(self._collection, {})
        rows = [(doc_id, data) for doc_id, data in docs.items()
                if all(data.get(field) == value for field, value in self._filters)]
        # 마지막 정렬 키부터 안정 정렬을 적용하면 다중 키 정렬이 됩니다.
        for field, direction in reversed(self._orders):
            rows.sort(key=lambda row: row[1].get(field), reverse=direction == firestore.Query.DESCENDING)
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            yield FakeSnapshot(FakeDocumentRef(self._db, self._collection, doc_id), copy.deepcopy(data))


class FakeCollectionRef(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)

    def document(self, doc_id=None):
        return FakeDocumentRef(self._db, self._collection, doc_id or uuid.uuid4().hex[:20])


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data):
        self._ops.append(('set', ref, data))

    def update(self, ref, data):
        self._ops.append(('update', ref, data))

    def commit(self):
        self._db.check_available()
        if self._db.fail_commits:
            raise ConnectionError("simulated batch commit failure")
        # 모든 대상이 유효한지 먼저 확인하여 전부 적용되거나 전혀 적용되지 않게 합니다.
        for op, ref, _ in self._ops:
            if op == 'update' and ref.id not in ref._docs:
                raise KeyError(f"No document to update: {ref.id}")
        for op, ref, data in self._ops:
            getattr(ref, op)(data)


class FakeFirestore:
    def __init__(self):
        self.collections = {}
        self.deleted = []
        self.reads = []
        self.fail_deletes = set()
        self.fail_commits = False
        self.unavailable = False

    def check_available(self):
        if self.unavailable:
            raise ConnectionError("simulated Firestore outage")

    def collection(self, name):
        return FakeCollectionRef(self, name)

    def batch(self):
        return FakeWriteBatch(self)


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def app(fake_db):
    app = create_app('testing', db=fake_db)
    # OpenAI 네트워크 호출을 막기 위해 클라이언트를 목으로 교체합니다.
    app.services['advice'].client = MagicMock()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cat_service(app):
    return app.services['cats']


@pytest.fixture
def care_log_service(app):
    return app.services['care_logs']


@pytest.fixture
def advice_service(app):
    return app.services['advice']


@pytest.fixture
def luna(cat_service):
    return cat_service.create_cat({
        'name': 'Luna', 'breed': 'Europeo', 'age': 3, 'weight': 4.0, 'gender': 'Femmina'
    })

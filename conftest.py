# conftest.py
"""
서비스 테스트용 pytest 픽스처.

Firestore 대신 DocumentStore와 같은 메서드를 가진 메모리 저장소를 사용합니다.
트랜잭션 콜백이 예외를 던지면 호출 전 상태로 되돌립니다.
"""
import copy
import operator

import pytest

from community_diary import create_app
from community_diary.api.comments.services import CommentService
from community_diary.api.diaries.services import DiaryService

_OPERATORS = {
    '==': operator.eq,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


def _matches(data, filters):
    for field_name, op, value in filters:
        if field_name not in data or not _OPERATORS[op](data[field_name], value):
            return False
    return True


class InMemoryTransactionScope:
    def __init__(self, store):
        self.store = store

    def get(self, collection, doc_id):
        return self.store.find_by_id(collection, doc_id)

    def find(self, collection, filters=()):
        return self.store.find(collection, filters)

    def create(self, collection, doc_id, data):
        self.store.create(collection, doc_id, data)

    def update(self, collection, doc_id, updates):
        self.store.update_by_id(collection, doc_id, updates)

    def delete(self, collection, doc_id):
        self.store.delete_by_id(collection, doc_id)


class InMemoryDocumentStore:
    def __init__(self):
        self.collections = {}
        self.fail_on = set()  # 이 이름의 메서드가 호출되면 RuntimeError를 던집니다.

    def _check(self, method):
        if method in self.fail_on:
            raise RuntimeError(f"store unavailable ({method})")

    def _collection(self, name):
        return self.collections.setdefault(name, {})

    def find_by_id(self, collection, doc_id):
        self._check('find_by_id')
        data = self._collection(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    def find(self, collection, filters=(), projection=None, order_by=None, limit=None):
        self._check('find')
        results = [
            copy.deepcopy(data) for data in self._collection(collection).values()
            if _matches(data, filters)
        ]
        if order_by:
            results.sort(key=lambda d: d[order_by])
        if projection:
            results = [{k: d[k] for k in projection if k in d} for d in results]
        if limit:
            results = results[:limit]
        return results

    def find_with_array_size(self, collection, filters, array_field, as_field, order_by=None):
        results = self.find(collection, filters, order_by=order_by)
        for data in results:
            data[as_field] = len(data.get(array_field) or [])
        return results

    def create(self, collection, doc_id, data):
        self._check('create')
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return data

    def update_by_id(self, collection, doc_id, updates):
        self._check('update_by_id')
        docs = self._collection(collection)
        if doc_id not in docs:
            raise KeyError(f"No document to update: {collection}/{doc_id}")
        docs[doc_id].update(copy.deepcopy(updates))
        return copy.deepcopy(docs[doc_id])

    def _first_id(self, collection, filters):
        for doc_id, data in self._collection(collection).items():
            if _matches(data, filters):
                return doc_id
        return None

    def find_one_and_update(self, collection, filters, updates, return_updated=True):
        doc_id = self._first_id(collection, filters)
        if doc_id is None:
            return None
        before = self.find_by_id(collection, doc_id)
        after = self.update_by_id(collection, doc_id, updates)
        return after if return_updated else before

    def find_one_and_delete(self, collection, filters):
        doc_id = self._first_id(collection, filters)
        if doc_id is None:
            return None
        deleted = self.find_by_id(collection, doc_id)
        self.delete_by_id(collection, doc_id)
        return deleted

    def delete_by_id(self, collection, doc_id):
        self._check('delete_by_id')
        self._collection(collection).pop(doc_id, None)

    def run_transaction(self, callback):
        snapshot = copy.deepcopy(self.collections)
        try:
            return callback(InMemoryTransactionScope(self))
        except Exception:
            self.collections = snapshot
            raise


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def comment_service(store):
    return CommentService(store=store)


@pytest.fixture
def diary_service(store):
    return DiaryService(store=store)


@pytest.fixture
def app(store):
    return create_app('testing', store=store)

# community_diary/services/test_document_store.py
"""
Firestore 문서 저장소 어댑터 테스트 (Firestore 클라이언트는 MagicMock으로 대체)
"""

from unittest.mock import MagicMock

import pytest

from community_diary.services import document_store
from community_diary.services.document_store import DocumentStore


def _snapshot(data, exists=True, doc_id='doc-1'):
    snapshot = MagicMock()
    snapshot.exists = exists
    snapshot.id = doc_id
    snapshot.to_dict.return_value = dict(data) if data is not None else None
    return snapshot


@pytest.fixture
def db():
    return MagicMock()


def test_find_by_id(db):
    db.collection.return_value.document.return_value.get.return_value = _snapshot({'comment_id': 'c1'})

    assert DocumentStore(db).find_by_id('comments', 'c1') == {'comment_id': 'c1'}
    db.collection.assert_called_with('comments')
    db.collection.return_value.document.assert_called_with('c1')


def test_find_by_id_missing(db):
    db.collection.return_value.document.return_value.get.return_value = _snapshot(None, exists=False)

    assert DocumentStore(db).find_by_id('comments', 'c1') is None


def test_find_builds_query(db):
    collection = db.collection.return_value
    query = collection.where.return_value.where.return_value
    projected = query.select.return_value
    projected.order_by.return_value.stream.return_value = [_snapshot({'tag': ['a']})]

    result = DocumentStore(db).find(
        'diaries',
        [('date', '>=', 1), ('date', '<=', 2)],
        projection=['tag'],
        order_by='date'
    )

    assert result == [{'tag': ['a']}]
    collection.where.assert_called_once_with('date', '>=', 1)
    collection.where.return_value.where.assert_called_once_with('date', '<=', 2)
    query.select.assert_called_once_with(['tag'])
    projected.order_by.assert_called_once_with('date')


def test_find_with_array_size(db):
    query = db.collection.return_value.where.return_value
    query.stream.return_value = [
        _snapshot({'comment_id': 'c1', 'like_ids': [{'user_id': 'u1'}]}),
        _snapshot({'comment_id': 'c2'}),
    ]

    result = DocumentStore(db).find_with_array_size(
        'comments', [('post_id', '==', 'p1')], array_field='like_ids', as_field='num_likes'
    )

    assert [r['num_likes'] for r in result] == [1, 0]


def test_find_one_and_update(db):
    limited = db.collection.return_value.where.return_value.limit.return_value
    snapshot = _snapshot({'title': 'old'})
    snapshot.reference.get.return_value = _snapshot({'title': 'new'})
    limited.stream.return_value = [snapshot]
    store = DocumentStore(db)

    assert store.find_one_and_update('diaries', [('date', '==', 1)], {'title': 'new'}) == {'title': 'new'}
    snapshot.reference.update.assert_called_with({'title': 'new'})
    db.collection.return_value.where.return_value.limit.assert_called_with(1)

    assert store.find_one_and_update('diaries', [('date', '==', 1)], {'title': 'new'},
                                     return_updated=False) == {'title': 'old'}


def test_find_one_and_update_without_match(db):
    db.collection.return_value.where.return_value.limit.return_value.stream.return_value = []

    assert DocumentStore(db).find_one_and_update('diaries', [('date', '==', 1)], {'title': 'x'}) is None


def test_find_one_and_delete(db):
    snapshot = _snapshot({'title': 'bye'})
    db.collection.return_value.where.return_value.limit.return_value.stream.return_value = [snapshot]

    assert DocumentStore(db).find_one_and_delete('diaries', [('date', '==', 1)]) == {'title': 'bye'}
    snapshot.reference.delete.assert_called_once_with()


def test_create_and_delete_by_id(db):
    doc_ref = db.collection.return_value.document.return_value
    store = DocumentStore(db)

    assert store.create('diaries', 'd1', {'title': 't'}) == {'title': 't'}
    doc_ref.set.assert_called_once_with({'title': 't'})

    store.delete_by_id('diaries', 'd1')
    doc_ref.delete.assert_called_once_with()


def test_run_transaction_uses_transaction_scope(db, monkeypatch):
    """트랜잭션 범위의 읽기/쓰기는 모두 같은 Firestore 트랜잭션을 거쳐야 함"""
    monkeypatch.setattr(document_store.firestore, 'transactional', lambda func: func)
    transaction = db.transaction.return_value
    doc_ref = db.collection.return_value.document.return_value
    doc_ref.get.return_value = _snapshot({'comment_ids': []})
    query = db.collection.return_value.where.return_value
    query.stream.return_value = [_snapshot({'comment_id': 'c0', 'post_id': 'p1'})]

    def _callback(tx):
        post = tx.get('posts', 'p1')
        assert tx.find('comments', [('post_id', '==', 'p1')]) == [{'comment_id': 'c0', 'post_id': 'p1'}]
        tx.create('comments', 'c1', {'comment_id': 'c1'})
        tx.update('posts', 'p1', {'comment_ids': post['comment_ids'] + ['c1']})
        tx.delete('comments', 'old')
        return 'done'

    assert DocumentStore(db).run_transaction(_callback) == 'done'
    doc_ref.get.assert_called_once_with(transaction=transaction)
    db.collection.return_value.where.assert_called_once_with('post_id', '==', 'p1')
    query.stream.assert_called_once_with(transaction=transaction)
    transaction.set.assert_called_once_with(doc_ref, {'comment_id': 'c1'})
    transaction.update.assert_called_once_with(doc_ref, {'comment_ids': ['c1']})
    transaction.delete.assert_called_once_with(doc_ref)

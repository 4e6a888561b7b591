# community_diary/services/document_store.py
"""
서비스 계층이 사용하는 문서 저장소 어댑터 (Firestore 구현).

서비스는 Firestore 클라이언트를 직접 다루지 않고 이 클래스를 통해
조회/생성/수정/삭제와 트랜잭션을 수행합니다.

필터는 (필드, 연산자, 값) 튜플의 목록입니다. 예: [('post_id', '==', post_id)]
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from firebase_admin import firestore

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]


class FirestoreTransactionScope:
    """
    run_transaction 콜백에 전달되는 트랜잭션 범위 객체.
    Firestore 제약에 따라 모든 읽기(get, find)는 쓰기보다 먼저 수행해야 합니다.
    """
    def __init__(self, db, transaction):
        self.db = db
        self.transaction = transaction

    def _ref(self, collection: str, doc_id: str):
        return self.db.collection(collection).document(doc_id)

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snapshot = self._ref(collection, doc_id).get(transaction=self.transaction)
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def find(self, collection: str, filters: Iterable[Filter] = ()) -> List[Dict[str, Any]]:
        query = self.db.collection(collection)
        for field_name, op, value in filters:
            query = query.where(field_name, op, value)
        return [doc.to_dict() for doc in query.stream(transaction=self.transaction)]

    def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.transaction.set(self._ref(collection, doc_id), data)

    def update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        self.transaction.update(self._ref(collection, doc_id), updates)

    def delete(self, collection: str, doc_id: str) -> None:
        self.transaction.delete(self._ref(collection, doc_id))


class DocumentStore:
    """Firestore 위에서 동작하는 문서 저장소."""

    def __init__(self, db=None):
        # db를 주입하지 않으면 create_app에서 초기화된 기본 Firebase 앱의 클라이언트를 사용합니다.
        self.db = db or firestore.client()

    def _query(self, collection: str, filters: Iterable[Filter] = (),
               projection: Optional[Sequence[str]] = None, order_by: Optional[str] = None,
               limit: Optional[int] = None):
        query = self.db.collection(collection)
        for field_name, op, value in filters:
            query = query.where(field_name, op, value)
        if projection:
            query = query.select(list(projection))
        if order_by:
            query = query.order_by(order_by)
        if limit:
            query = query.limit(limit)
        return query

    def find_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """문서 ID로 단일 문서를 조회합니다. 없으면 None."""
        doc = self.db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def find(self, collection: str, filters: Iterable[Filter] = (),
             projection: Optional[Sequence[str]] = None, order_by: Optional[str] = None,
             limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """필터에 맞는 문서 목록을 조회합니다. projection이 있으면 해당 필드만 가져옵니다."""
        docs = self._query(collection, filters, projection, order_by, limit).stream()
        return [doc.to_dict() for doc in docs]

    def find_with_array_size(self, collection: str, filters: Iterable[Filter], array_field: str,
                             as_field: str, order_by: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        필터에 맞는 문서마다 배열 필드의 길이를 계산해 as_field로 추가합니다.
        Firestore에는 $size 같은 집계 연산이 없어 조회 후 계산합니다.
        """
        results = []
        for data in self.find(collection, filters, order_by=order_by):
            data[as_field] = len(data.get(array_field) or [])
            results.append(data)
        return results

    def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.db.collection(collection).document(doc_id).set(data)
        logger.info(f"Firestore 문서 생성 (Collection: {collection}, Doc ID: {doc_id})")
        return data

    def update_by_id(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        doc_ref = self.db.collection(collection).document(doc_id)
        doc_ref.update(updates)
        return doc_ref.get().to_dict()

    def find_one_and_update(self, collection: str, filters: Iterable[Filter], updates: Dict[str, Any],
                            return_updated: bool = True) -> Optional[Dict[str, Any]]:
        """
        필터에 맞는 첫 번째 문서를 수정합니다.
        return_updated가 False이면 수정 전 문서를 반환합니다. 맞는 문서가 없으면 None.
        """
        docs = list(self._query(collection, filters, limit=1).stream())
        if not docs:
            return None
        snapshot = docs[0]
        before = snapshot.to_dict()
        snapshot.reference.update(updates)
        if not return_updated:
            return before
        return snapshot.reference.get().to_dict()

    def find_one_and_delete(self, collection: str, filters: Iterable[Filter]) -> Optional[Dict[str, Any]]:
        """필터에 맞는 첫 번째 문서를 삭제하고 삭제된 문서를 반환합니다. 없으면 None."""
        docs = list(self._query(collection, filters, limit=1).stream())
        if not docs:
            return None
        snapshot = docs[0]
        deleted = snapshot.to_dict()
        snapshot.reference.delete()
        logger.info(f"Firestore 문서 삭제 (Collection: {collection}, Doc ID: {snapshot.id})")
        return deleted

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        self.db.collection(collection).document(doc_id).delete()
        logger.info(f"Firestore 문서 삭제 (Collection: {collection}, Doc ID: {doc_id})")

    def run_transaction(self, callback: Callable[[FirestoreTransactionScope], Any]) -> Any:
        """
        callback(scope)를 하나의 Firestore 트랜잭션 안에서 실행하고 결과를 반환합니다.
        충돌 시 Firestore 클라이언트가 callback을 다시 호출할 수 있습니다.
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _run_in_transaction(transaction):
            return callback(FirestoreTransactionScope(self.db, transaction))

        return _run_in_transaction(transaction)

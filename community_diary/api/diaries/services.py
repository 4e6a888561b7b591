# community_diary/api/diaries/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from community_diary.api.diaries.schemas import DiarySchema
from community_diary.core.errors import ConflictError, raise_operation_error
from community_diary.models.diary import Diary
from community_diary.services.document_store import DocumentStore
from community_diary.utils.datetime_utils import DateTimeUtils, to_diary_key

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    'create': "다이어리 생성에 실패했습니다.",
    'update': "다이어리 수정에 실패했습니다.",
    'delete': "다이어리 삭제에 실패했습니다.",
    'get': "다이어리를 불러오는 데에 실패했습니다.",
}


class DiaryService:
    """
    다이어리 관련 비즈니스 로직을 담당하는 서비스 클래스.
    다이어리는 날짜(date)로 조회/수정/삭제하며, 해당 날짜의 다이어리가 없으면
    오류 대신 None을 반환합니다.
    """
    def __init__(self, store: Optional[DocumentStore] = None,
                 diaries_collection: str = 'diaries', enforce_unique_date: bool = False):
        self.store = store or DocumentStore()
        self.diaries_collection = diaries_collection
        self.enforce_unique_date = enforce_unique_date

    def _dump(self, diary: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        return DiarySchema().dump(diary) if diary is not None else None

    def create_diary(self, date, tag: List[str], title: str, content: str,
                     share_status: bool) -> Dict[str, Any]:
        """
        새 다이어리를 생성합니다.
        enforce_unique_date가 켜져 있으면 같은 날짜의 다이어리가 이미 있을 때 실패합니다.
        """
        try:
            new_diary = Diary(
                diary_id=str(uuid.uuid4()),
                date=to_diary_key(date),
                tag=list(tag or []),
                title=title,
                content=content,
                share_status=share_status
            )
            diary_data = asdict(new_diary)

            if self.enforce_unique_date:
                def _create_unique_in_transaction(tx):
                    if tx.find(self.diaries_collection, [('date', '==', new_diary.date)]):
                        raise ConflictError("해당 날짜의 다이어리가 이미 존재합니다.")
                    tx.create(self.diaries_collection, new_diary.diary_id, diary_data)
                    return diary_data

                created = self.store.run_transaction(_create_unique_in_transaction)
            else:
                created = self.store.create(self.diaries_collection, new_diary.diary_id, diary_data)
            return DiarySchema().dump(created)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['create'], e)

    def update_diary(self, date, tag: List[str], title: str, content: str,
                     share_status: bool) -> Optional[Dict[str, Any]]:
        """해당 날짜 다이어리의 태그/제목/내용/공개 여부를 바꿉니다. 없으면 None."""
        try:
            updated = self.store.find_one_and_update(
                self.diaries_collection,
                [('date', '==', to_diary_key(date))],
                {'tag': list(tag or []), 'title': title, 'content': content, 'share_status': share_status},
                return_updated=True
            )
            return self._dump(updated)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['update'], e)

    def photo_register_in_diary(self, date, image: Optional[str]) -> Optional[Dict[str, Any]]:
        """해당 날짜 다이어리에 사진 경로를 등록합니다. 없으면 None."""
        try:
            updated = self.store.find_one_and_update(
                self.diaries_collection,
                [('date', '==', to_diary_key(date))],
                {'image': image},
                return_updated=True
            )
            return self._dump(updated)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['update'], e)

    def delete_diary(self, date) -> Optional[Dict[str, Any]]:
        """해당 날짜 다이어리를 삭제하고 삭제된 다이어리를 반환합니다. 없으면 None."""
        try:
            deleted = self.store.find_one_and_delete(
                self.diaries_collection,
                [('date', '==', to_diary_key(date))]
            )
            if deleted is not None:
                logger.info(f"다이어리 삭제 완료 (date: {DateTimeUtils.to_date_string(deleted['date'])})")
            return self._dump(deleted)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['delete'], e)

    def get_diary(self, date) -> Optional[Dict[str, Any]]:
        """해당 날짜 다이어리를 조회합니다. 없으면 None."""
        try:
            diaries = self.store.find(
                self.diaries_collection,
                [('date', '==', to_diary_key(date))],
                limit=1
            )
            return self._dump(diaries[0]) if diaries else None
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['get'], e)

    def get_all_diaries_by_month(self, start_date, end_date) -> Dict[str, int]:
        """
        start_date ~ end_date (양 끝 포함) 사이 다이어리들의 태그별 등장 횟수를 집계합니다.

        각 다이어리의 tag 항목은 "work, urgent" 처럼 쉼표로 이어진 문자열이므로
        쉼표로 나누고 공백을 제거한 토큰 단위로 셉니다. 빈 문자열 토큰도 하나의 태그로 셉니다.
        """
        try:
            diaries = self.store.find(
                self.diaries_collection,
                [('date', '>=', to_diary_key(start_date)), ('date', '<=', to_diary_key(end_date))],
                projection=['tag']
            )

            tags_count: Dict[str, int] = {}
            for diary in diaries:
                for tag in diary.get('tag') or []:
                    for token in str(tag).split(','):
                        token = token.strip()
                        tags_count[token] = tags_count.get(token, 0) + 1
            return tags_count
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['get'], e)

    def get_tag_counts_for_month(self, year: int, month: int) -> Dict[str, int]:
        """특정 년월 한 달 동안의 태그별 등장 횟수를 집계합니다."""
        try:
            start_date, end_date = DateTimeUtils.get_month_range(year, month)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['get'], e)
        return self.get_all_diaries_by_month(start_date, end_date)

# community_diary/models/diary.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from community_diary.utils.datetime_utils import DateTimeUtils


@dataclass
class Diary:
    """
    Firestore 'diaries' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    조회/수정/삭제는 diary_id가 아니라 date로 합니다.
    """
    diary_id: str
    date: datetime      # UTC 자정으로 정규화된 날짜 키
    tag: List[str]      # 쉼표로 구분된 태그 문자열 목록, 예: ["work, urgent"]
    title: str
    content: str
    share_status: bool
    image: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

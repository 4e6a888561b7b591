# community_diary/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict

from community_diary.utils.datetime_utils import DateTimeUtils


@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    comment_id: str
    post_id: str
    user_id: str        # 작성자 ID (수정/삭제 권한 확인에 사용)
    name: str
    profile_image: str
    checked_badge: str
    comment: str
    like_ids: List[Dict[str, str]] = field(default_factory=list)  # [{'user_id', 'name'}]
    created_at: datetime = field(default_factory=DateTimeUtils.now)

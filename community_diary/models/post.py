# community_diary/models/post.py
from dataclasses import dataclass, field
from typing import List


@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션 문서 중 댓글 서비스가 관리하는 부분.
    게시글 본문 등 나머지 필드는 커뮤니티 게시글 쪽에서 관리합니다.
    """
    post_id: str
    comment_ids: List[str] = field(default_factory=list)

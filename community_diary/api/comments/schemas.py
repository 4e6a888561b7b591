# community_diary/api/comments/schemas.py
from marshmallow import Schema, fields


class LikeSchema(Schema):
    """댓글 좋아요 목록의 항목."""
    user_id = fields.Str(required=True)
    name = fields.Str(allow_none=True)


class CommentSchema(Schema):
    """
    댓글 문서를 호출자에게 돌려줄 형식으로 변환합니다.
    num_likes는 조회 시에만 채워지는 집계 필드입니다.
    """
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    name = fields.Str(allow_none=True)
    profile_image = fields.Str(allow_none=True)
    checked_badge = fields.Str(allow_none=True)
    comment = fields.Str(required=True)
    like_ids = fields.List(fields.Nested(LikeSchema), dump_default=list)
    num_likes = fields.Int(dump_only=True)
    created_at = fields.DateTime()

# community_diary/api/diaries/schemas.py
from marshmallow import Schema, fields

from community_diary.utils.datetime_utils import DateTimeUtils


class DiarySchema(Schema):
    """
    다이어리 문서를 호출자에게 돌려줄 형식으로 변환합니다.
    저장소에는 UTC 자정 datetime으로 저장된 date를 'YYYY-MM-DD' 문자열로 내보냅니다.
    """
    diary_id = fields.Str()
    date = fields.Method('get_date')
    tag = fields.List(fields.Str())
    title = fields.Str()
    content = fields.Str()
    share_status = fields.Bool()
    image = fields.Str(allow_none=True)
    created_at = fields.DateTime()

    def get_date(self, obj):
        value = obj.get('date')
        return DateTimeUtils.to_date_string(value) if value is not None else None

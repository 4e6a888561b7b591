# community_diary/utils/datetime_utils.py
"""
다이어리 날짜 키와 Firestore 시간 값을 일관되게 다루기 위한 유틸리티 모듈

- 다이어리의 date 필드는 항상 UTC 자정의 timezone-aware datetime으로 저장합니다.
- 같은 날짜라면 입력 형식(date, datetime, 문자열)과 관계없이 같은 키가 됩니다.
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Union
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        날짜 문자열을 date 객체로 파싱

        지원 포맷:
        - 2024-01-15
        - 2024/01/15
        - 2024-01-15T10:30:00Z
        """
        try:
            if not date_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")
            return dateutil_parser.parse(date_string).date()
        except (ValueError, OverflowError) as e:
            logger.error(f"날짜 문자열 파싱 실패: {date_string} - {e}")
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")

    @staticmethod
    def validate_date_field(value: Any, field_name: str = "date") -> date:
        """
        서비스 입력으로 받은 date 값을 검증하고 date 객체로 변환

        Raises:
            ValueError: 잘못된 형식이거나 파싱할 수 없는 경우
        """
        if value is None:
            raise ValueError(f"{field_name}은 필수 필드입니다")
        if isinstance(value, str):
            return DateTimeUtils.parse_date_string(value)
        # datetime은 date의 하위 클래스이므로 먼저 확인해야 합니다.
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date()
        if isinstance(value, date):
            return value
        raise ValueError(f"{field_name}은 문자열 또는 date/datetime 객체여야 합니다")

    @staticmethod
    def to_date_string(d: Union[date, datetime]) -> str:
        """date 객체를 YYYY-MM-DD 형식 문자열로 변환"""
        return DateTimeUtils.validate_date_field(d).strftime('%Y-%m-%d')

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def get_month_range(year: int, month: int) -> tuple[date, date]:
        """특정 년월의 첫째 날과 마지막 날을 반환"""
        try:
            start_date = date(year, month, 1)
            end_date = start_date + relativedelta(months=1) - relativedelta(days=1)
            return start_date, end_date
        except ValueError as e:
            logger.error(f"월 범위 계산 실패: {year}-{month} - {e}")
            raise ValueError(f"월 범위를 계산할 수 없습니다: {year}-{month}")


def to_diary_key(value: Any) -> datetime:
    """다이어리 조회/저장에 쓰는 날짜 키(UTC 자정 datetime)를 만듭니다."""
    return DateTimeUtils.for_firestore(DateTimeUtils.validate_date_field(value))

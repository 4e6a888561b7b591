# community_diary/utils/__init__.py
"""
유틸리티 모듈 패키지
"""

from .datetime_utils import DateTimeUtils, to_diary_key

__all__ = ['DateTimeUtils', 'to_diary_key']

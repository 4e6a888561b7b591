# community_diary/core/config.py

import os


def _env_flag(name: str, default: bool = False) -> bool:
    """'true', '1', 'yes' 형태의 환경 변수를 bool 값으로 읽습니다."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # Firestore 컬렉션 이름. 게시글 컬렉션은 커뮤니티 쪽에서 관리하며 여기서는 commentIds 배열만 갱신합니다.
    COMMENTS_COLLECTION = os.getenv('COMMENTS_COLLECTION', 'comments')
    POSTS_COLLECTION = os.getenv('POSTS_COLLECTION', 'posts')
    DIARIES_COLLECTION = os.getenv('DIARIES_COLLECTION', 'diaries')

    # 같은 날짜의 다이어리를 하나만 허용할지 여부. 기본값은 중복 허용입니다.
    DIARY_ENFORCE_UNIQUE_DATE = _env_flag('DIARY_ENFORCE_UNIQUE_DATE', False)


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)

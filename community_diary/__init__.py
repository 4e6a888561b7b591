# community_diary/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
import firebase_admin
from firebase_admin import credentials

# - 설정 및 오류 타입
from community_diary.core.config import config_by_name
from community_diary.core.errors import ErrorKind, ServiceError

# - 서비스 모듈
from community_diary.services.document_store import DocumentStore
from community_diary.api.comments.services import CommentService
from community_diary.api.diaries.services import DiaryService

# 서비스 오류 종류별 HTTP 상태 코드
STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.STORE_FAILURE: 500,
}


def create_app(config_name=None, store=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development', 'testing', 'production' 중 하나. 없으면 FLASK_ENV 값을 사용합니다.
    :param store: 주입할 문서 저장소. 없으면 Firebase를 초기화하고 Firestore 저장소를 만듭니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 외부 서비스 초기화
    # =====================================================================================
    if store is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        store = DocumentStore()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}
    app.services['store'] = store
    app.services['comments'] = CommentService(
        store=store,
        comments_collection=app.config['COMMENTS_COLLECTION'],
        posts_collection=app.config['POSTS_COLLECTION']
    )
    app.services['diaries'] = DiaryService(
        store=store,
        diaries_collection=app.config['DIARIES_COLLECTION'],
        enforce_unique_date=app.config['DIARY_ENFORCE_UNIQUE_DATE']
    )

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ServiceError)
    def handle_service_error(err):
        response = {"error_code": err.kind.value, "message": err.message}
        return jsonify(response), STATUS_BY_KIND.get(err.kind, 500)

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

# catcare/__init__.py

# =====================================================================================
# 1. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from catcare.core.config import config_by_name

# - API 블루프린트
from catcare.api.cats.routes import cats_bp
from catcare.api.care_logs.routes import care_logs_bp
from catcare.api.advice.routes import advice_bp

# - 서비스 모듈
from catcare.services.advice_service import AdviceService
from catcare.api.care_logs.services import CareLogService
from catcare.api.cats.services import CatService


def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'production' / 'testing' (기본값: FLASK_ENV)
    :param db: 주입할 Firestore 클라이언트. 없으면 firebase-admin을 초기화하여 생성합니다.
    """
    # =====================================================================================
    # 2. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 3. 외부 서비스 초기화
    # =====================================================================================
    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        db = firestore.client()

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    try:
        advice_instance = AdviceService()
        advice_instance.init_app(app)
        app.services['advice'] = advice_instance
        logging.info("Advice service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize advice service: {e}")
        raise

    # 케어 기록 서비스가 고양이 서비스의 연쇄 삭제에 주입됩니다.
    app.services['care_logs'] = CareLogService(db=db)
    app.services['cats'] = CatService(care_log_service=app.services['care_logs'], db=db)

    # =====================================================================================
    # 5. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(cats_bp, url_prefix='/api/cats')
    app.register_blueprint(care_logs_bp, url_prefix='/api/cats')
    app.register_blueprint(advice_bp, url_prefix='/api')

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    # NotFoundError, DependencyError 등 도메인 예외는 각 라우트에서 error_code로 변환합니다.
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

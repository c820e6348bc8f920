# director/__init__.py

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
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
import firebase_admin
from firebase_admin import credentials

# - 설정
from director.core.config import config_by_name

# - API 블루프린트
from director.api.analyze.routes import analyze_bp
from director.api.snapshots.routes import snapshots_bp

# - 서비스 모듈
from director.services import openai_service as openai_service_module
from director.services.snapshot_store import create_snapshot_store
from director.api.analyze.services import SceneAnalysisService


def create_app(config_name=None, services=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param services: 미리 만들어 둔 서비스 인스턴스 (테스트에서 대역 주입용)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. 외부 서비스 초기화 (Firestore 저장소를 쓸 때만 Firebase 연결)
    # =====================================================================================
    injected = dict(services or {})

    if app.config['SNAPSHOT_STORE'] == 'firestore' and 'snapshots' not in injected and not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    try:
        app.services['snapshots'] = injected.get('snapshots') or create_snapshot_store(app)
        logging.info(f"Snapshot store initialized successfully ({type(app.services['snapshots']).__name__})")
    except Exception as e:
        logging.error(f"Failed to initialize snapshot store: {e}")
        raise

    try:
        openai_instance = injected.get('openai') or openai_service_module.OpenAIService()
        openai_instance.init_app(app)
        app.services['openai'] = openai_instance
        logging.info("OpenAI service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize OpenAI service: {e}")
        raise

    # - 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['scene_analysis'] = SceneAnalysisService(
        openai_service=app.services['openai'],
        snapshot_store=app.services['snapshots']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(analyze_bp, url_prefix='/api/analyze')
    app.register_blueprint(snapshots_bp, url_prefix='/api/snapshots')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return jsonify({"message": "Invalid request", "details": err.messages}), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(err):
        return jsonify({"message": "Image payload is too large"}), 413

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 라우팅 오류(404, 405 등)는 상태 코드를 유지합니다.
        if isinstance(err, HTTPException):
            return jsonify({"message": err.description}), err.code
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return jsonify({"message": "Internal server error"}), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

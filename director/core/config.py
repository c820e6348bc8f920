# director/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # OpenAI Vision 호출에 사용할 키와 (선택) 엔드포인트. 통합 환경 변수 이름도 함께 지원합니다.
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY') or os.getenv('AI_INTEGRATIONS_OPENAI_API_KEY')
    OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL') or os.getenv('AI_INTEGRATIONS_OPENAI_BASE_URL')
    OPENAI_VISION_MODEL = os.getenv('OPENAI_VISION_MODEL', 'gpt-4o')
    # 'low': 페이로드를 작게 유지해 응답 속도를 높입니다.
    OPENAI_IMAGE_DETAIL = os.getenv('OPENAI_IMAGE_DETAIL', 'low')

    # 스냅샷 저장소 종류: 'firestore' 또는 'memory'
    SNAPSHOT_STORE = os.getenv('SNAPSHOT_STORE', 'firestore')
    SNAPSHOTS_COLLECTION = os.getenv('SNAPSHOTS_COLLECTION', 'snapshots')
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

    # base64 data URL 이미지가 본문에 실리므로 요청 크기 상한을 둡니다.
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. 외부 서비스 없이 메모리 저장소를 사용합니다."""
    TESTING = True
    DEBUG = False
    SNAPSHOT_STORE = 'memory'
    OPENAI_API_KEY = 'test-key'

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False

# config_by_name: FLASK_ENV 값에 따라 create_app에서 적절한 설정 클래스를 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)

# catcare/core/config.py

import os

# list_logs_for_cat이 허용하는 조회 개수 상한
MAX_LOG_LIMIT = 100


def log_limit_from_env(name: str, default: int) -> int:
    """환경 변수의 기록 조회 개수를 1 ~ MAX_LOG_LIMIT 범위로 맞춥니다."""
    return min(max(int(os.getenv(name, default)), 1), MAX_LOG_LIMIT)


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # AI 상담 기능에서 사용하는 OpenAI API 키와 모델명
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

    # AI 상담 프롬프트에 포함할 최근 기록 수, 기록 조회 기본 개수
    ADVICE_LOG_LIMIT = log_limit_from_env('ADVICE_LOG_LIMIT', 10)
    DEFAULT_LOG_LIMIT = log_limit_from_env('DEFAULT_LOG_LIMIT', MAX_LOG_LIMIT)


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    # 테스트에서는 OpenAI 클라이언트를 목(mock)으로 교체하므로 더미 키로 충분합니다.
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY') or 'test-openai-key'


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    production=ProductionConfig,
    testing=TestingConfig
)

import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    # App settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-in-production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///diary.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session token cookie issued by the users service
    SESSION_TOKEN_COOKIE_NAME = os.getenv('SESSION_TOKEN_COOKIE_NAME', 'diary_session_token')
    SESSION_TOKEN_MAX_AGE = timedelta(days=60)

    # Users service (OAuth + sessions)
    USERS_SERVICE_API_URL = os.getenv('USERS_SERVICE_API_URL')
    USERS_SERVICE_API_KEY = os.getenv('USERS_SERVICE_API_KEY')
    USERS_SERVICE_TIMEOUT = float(os.getenv('USERS_SERVICE_TIMEOUT')) if os.getenv('USERS_SERVICE_TIMEOUT') else None

    # OpenAI
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

    # Insights
    INSIGHT_WINDOW_DAYS = 14
    INSIGHT_MIN_ENTRIES = 3
    TREND_ROLLING_WINDOW = 3

class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URI', 'sqlite:///dev.db')

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    OPENAI_API_KEY = 'test-openai-key'
    USERS_SERVICE_API_URL = 'http://users.test/api'
    USERS_SERVICE_API_KEY = 'test-users-key'

class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}

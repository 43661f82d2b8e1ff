# config.py

import os
from datetime import timedelta

import certifi


class Config(object):
    DEBUG = False
    TESTING = False
    CSRF_ENABLED = False
    MAX_CONTENT_LENGTH = 12 * 1024 * 1024 # 10MB image plus form overhead
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', 'dev-jwt-secret-key')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    BCRYPT_LOG_ROUNDS = 12
    MONGODB_SETTINGS = { 'host': os.environ.get('MONGODB_HOST', 'mongodb://localhost:27017/gymbro') }
    CLIENT_URL = os.environ.get('CLIENT_URL', 'http://localhost:3000')

    # uploads
    IMAGE_STORAGE = os.environ.get('IMAGE_STORAGE', 'local')
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    POST_IMAGE_MAX_SIZE = 10 * 1024 * 1024
    PROFILE_IMAGE_MAX_SIZE = 5 * 1024 * 1024
    CLOUD_NAME = os.environ.get('CLOUD_NAME')
    CLOUDINARY_API_KEY = os.environ.get('API_KEY')
    CLOUDINARY_API_SECRET = os.environ.get('API_SECRET')

    # AI proxy
    AI_API_KEY = os.environ.get('AI_API_KEY')
    AI_API_ENDPOINT = os.environ.get('AI_API_ENDPOINT', 'https://api.openai.com/v1/chat/completions')
    AI_MODEL = os.environ.get('AI_MODEL', 'gpt-3.5-turbo')
    AI_TIMEOUT = 30

    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    AUTH_BYPASS_EMAIL = None

    SOCKETIO_ASYNC_MODE = None

    LOG_LEVEL = 'INFO'


class ProductionConfig(Config):
    DEBUG = False
    MONGODB_SETTINGS = {
        'host': os.environ.get('MONGODB_HOST', 'mongodb://localhost:27017/gymbro'),
        'tlsCAFile': certifi.where()
    }


class DevelopmentConfig(Config):
    DEVELOPMENT = True
    DEBUG = True
    AUTH_BYPASS_EMAIL = os.environ.get('AUTH_BYPASS_EMAIL', 'test@test.com')
    LOG_LEVEL = 'DEBUG'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key'
    MONGODB_SETTINGS = { 'host': 'mongodb://localhost', 'db': 'gymbro_test' }
    IMAGE_STORAGE = 'local'
    AI_API_KEY = 'test-ai-key'
    AUTH_BYPASS_EMAIL = 'test@test.com'
    BCRYPT_LOG_ROUNDS = 4
    SOCKETIO_ASYNC_MODE = 'threading'
    LOG_LEVEL = 'WARNING'


config_by_name = {
    'production': ProductionConfig,
    'development': DevelopmentConfig,
    'testing': TestingConfig
}

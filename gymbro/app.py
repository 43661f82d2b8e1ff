# app.py

import logging
import os

import cloudinary
from flask import Flask, send_from_directory
from mongoengine import DoesNotExist, NotUniqueError, ValidationError, connect
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from gymbro.config import config_by_name
from gymbro.extensions import bcrypt, cors, jwt, socketio
from gymbro.models.user import User
from gymbro.services.ai import AIServiceError
from gymbro.services.storage import StorageError
from gymbro.utils import find_by_id, isoformat, utcnow

logger = logging.getLogger(__name__)


def create_app(config=None):
    app = Flask(__name__)

    if config is None:
        config = config_by_name[os.environ.get('FLASK_CONFIG', 'production')]
    app.config.from_object(config)

    logging.basicConfig(level=app.config['LOG_LEVEL'], format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    # MongoEngine
    connect(**app.config['MONGODB_SETTINGS'])

    # Extensions
    bcrypt.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, origins=app.config['CLIENT_URL'], supports_credentials=True)
    socketio.init_app(app, cors_allowed_origins=app.config['CLIENT_URL'],
                      async_mode=app.config['SOCKETIO_ASYNC_MODE'])

    # Cloudinary
    if app.config['IMAGE_STORAGE'] == 'cloudinary':
        cloudinary.config(cloud_name=app.config['CLOUD_NAME'], api_key=app.config['CLOUDINARY_API_KEY'],
                          api_secret=app.config['CLOUDINARY_API_SECRET'])

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Blueprints
    from gymbro.controllers.ai import ai_bp
    from gymbro.controllers.auth import auth_bp
    from gymbro.controllers.chat import chat_bp
    from gymbro.controllers.comment import comment_bp
    from gymbro.controllers.like import like_bp
    from gymbro.controllers.post import post_bp
    from gymbro.controllers.search import search_bp
    from gymbro.controllers.user import user_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/users')
    app.register_blueprint(post_bp, url_prefix='/api/posts')
    app.register_blueprint(comment_bp, url_prefix='/api/comments')
    app.register_blueprint(like_bp, url_prefix='/api/likes')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')
    app.register_blueprint(chat_bp, url_prefix='/api/chat')
    app.register_blueprint(search_bp, url_prefix='/api/search')

    # Socket events
    from gymbro import sockets # noqa: F401

    register_jwt_callbacks()
    register_error_handlers(app)

    # index()
    @app.route('/', methods=['GET'])
    def index():
        return 'GYMbro API is running'

    # status()
    @app.route('/api/status', methods=['GET'])
    def status():
        return { 'status': 'ok', 'time': isoformat(utcnow()) }, 200

    # uploads()
    @app.route('/uploads/<path:filename>', methods=['GET'])
    def uploads(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    return app


def register_jwt_callbacks():
    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_data):
        return find_by_id(User, jwt_data['sub'])

    @jwt.user_lookup_error_loader
    def user_not_found(jwt_header, jwt_data):
        return { 'message': 'User not found' }, 404

    @jwt.unauthorized_loader
    def missing_token(reason):
        return { 'message': 'Access token is required' }, 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return { 'message': 'Invalid or expired token' }, 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_data):
        return { 'message': 'Invalid or expired token' }, 403


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def validation_error(e):
        return { 'message': 'Validation error', 'errors': { key: str(value) for key, value in (e.errors or {}).items() } }, 400

    @app.errorhandler(DoesNotExist)
    def not_found(e):
        return { 'message': 'Resource not found' }, 404

    @app.errorhandler(NotUniqueError)
    def not_unique(e):
        return { 'message': 'Resource already exists' }, 409

    @app.errorhandler(StorageError)
    def storage_error(e):
        return { 'message': e.message }, e.status_code

    @app.errorhandler(AIServiceError)
    def ai_service_error(e):
        return { 'message': e.message }, 502

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return { 'message': 'File too large' }, 413

    @app.errorhandler(HTTPException)
    def http_error(e):
        return { 'message': e.description }, e.code

    @app.errorhandler(Exception)
    def server_error(e):
        logger.exception('Unhandled error')
        return { 'message': 'Server error' }, 500

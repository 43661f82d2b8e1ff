import io

import mongomock
import pytest
from mongoengine import disconnect

from gymbro import sockets
from gymbro.app import create_app
from gymbro.config import TestingConfig
from gymbro.extensions import socketio
from gymbro.models.comment import Comment
from gymbro.models.like import Like
from gymbro.models.message import Message
from gymbro.models.post import Post
from gymbro.models.user import User

# 1x1 transparent PNG
PNG_BYTES = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89'
    b'\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82'
)


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        MONGODB_SETTINGS = {
            'host': 'mongodb://localhost',
            'db': 'gymbro_test',
            'mongo_client_class': mongomock.MongoClient
        }
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)

    yield app

    for model in (Message, Like, Comment, Post, User):
        model.drop_collection()
    sockets.connected_users.clear()
    disconnect()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app, client):
    def make():
        return socketio.test_client(app, flask_test_client=client)
    return make


@pytest.fixture
def register(client):
    """Register a user through the API and return its id, tokens and auth headers."""
    def make(username='lifter', email=None, password='Password123!'):
        email = email or f'{username}@example.com'
        response = client.post('/api/auth/register', json={
            'username': username,
            'email': email,
            'password': password
        })
        assert response.status_code == 201, response.get_json()

        body = response.get_json()
        return {
            'id': body['user']['id'],
            'username': username,
            'email': email,
            'password': password,
            'accessToken': body['accessToken'],
            'refreshToken': body['refreshToken'],
            'headers': { 'Authorization': f'Bearer {body["accessToken"]}' }
        }
    return make


@pytest.fixture
def create_post(client):
    def make(user, content='Leg day done'):
        response = client.post('/api/posts', json={ 'content': content }, headers=user['headers'])
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return make


@pytest.fixture
def png_file():
    def make(name='photo.png', mimetype='image/png'):
        return (io.BytesIO(PNG_BYTES), name, mimetype)
    return make

# extensions.py

from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_socketio import SocketIO

# Password hashing
bcrypt = Bcrypt()

# JWT for authentication
jwt = JWTManager()

# Enabling CORS
cors = CORS()

# SocketIO for real-time chat
socketio = SocketIO()

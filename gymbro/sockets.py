# sockets.py

"""Socket.IO chat relay.

Connected users are tracked in a process-local map from user id to socket
ids. A message is saved before it is relayed; when the receiver is offline it
simply waits in the database for the next history fetch.
"""

import logging
import threading

from flask import request
from flask_socketio import emit
from mongoengine import OperationError, ValidationError
from pymongo.errors import PyMongoError

from gymbro.extensions import socketio
from gymbro.models.message import Message
from gymbro.models.user import User
from gymbro.utils import find_by_id

logger = logging.getLogger(__name__)

# userId -> set of socket ids
connected_users = {}
connected_users_lock = threading.Lock()


def online_user_ids():
    with connected_users_lock:
        return list(connected_users.keys())


def sockets_for(user_id):
    with connected_users_lock:
        return list(connected_users.get(str(user_id), ()))


def _add_socket(user_id, sid):
    with connected_users_lock:
        connected_users.setdefault(str(user_id), set()).add(sid)


def _remove_socket(sid):
    with connected_users_lock:
        for user_id, sids in list(connected_users.items()):
            sids.discard(sid)
            if not sids:
                del connected_users[user_id]


@socketio.on('connect')
def on_connect():
    logger.info('Socket connected: %s', request.sid)


@socketio.on('user_connected')
def on_user_connected(user_id):
    if not user_id:
        return

    _add_socket(user_id, request.sid)
    logger.info('User %s online on socket %s', user_id, request.sid)

    socketio.emit('users_online', online_user_ids())


@socketio.on('send_message')
def on_send_message(data):
    if not isinstance(data, dict):
        data = {}
    sender = find_by_id(User, str(data.get('sender') or ''))
    receiver = find_by_id(User, str(data.get('receiver') or ''))
    content = data.get('content')
    content = content.strip() if isinstance(content, str) else ''

    if sender is None or receiver is None or not content:
        emit('message_error', { 'message': 'Invalid message' })
        return

    message = Message(sender=sender, receiver=receiver, content=content)
    try:
        message.save()
    except (ValidationError, OperationError, PyMongoError) as e:
        logger.warning('Could not save message from %s: %s', sender.pk, e)
        emit('message_error', { 'message': 'Could not send message' })
        return

    payload = message.to_dict()

    for sid in sockets_for(receiver.pk):
        emit('receive_message', payload, to=sid)

    emit('message_sent', payload)


@socketio.on('disconnect')
def on_disconnect(*args):
    _remove_socket(request.sid)
    logger.info('Socket disconnected: %s', request.sid)

    socketio.emit('users_online', online_user_ids())

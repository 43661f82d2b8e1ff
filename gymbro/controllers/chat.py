# chat.py

import logging

from flask import Blueprint
from flask_jwt_extended import get_current_user, jwt_required
from mongoengine.queryset.visitor import Q

from gymbro.models.message import Message
from gymbro.models.user import User
from gymbro.utils import find_by_id

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat_bp', __name__)


def _forbidden(user_id):
    return str(get_current_user().pk) != user_id


# get_chat_history()
@chat_bp.route('/history/<string:user_id>/<string:other_user_id>', methods=['GET'])
@jwt_required()
def get_chat_history(user_id, other_user_id):
    if _forbidden(user_id):
        return { 'message': 'Not authorized to read this conversation' }, 403

    other_user = find_by_id(User, other_user_id)

    if other_user is None:
        return { 'message': 'User not found' }, 404

    user = get_current_user()
    messages = Message.objects(
        Q(sender=user, receiver=other_user) | Q(sender=other_user, receiver=user)
    ).order_by('timestamp')

    return [message.to_dict() for message in messages], 200


# get_contacts()
@chat_bp.route('/contacts/<string:user_id>', methods=['GET'])
@jwt_required()
def get_contacts(user_id):
    if _forbidden(user_id):
        return { 'message': 'Not authorized to read these contacts' }, 403

    users = User.objects(id__ne=user_id).order_by('username')

    return [user.to_summary() for user in users], 200


# mark_messages_as_read()
@chat_bp.route('/read/<string:user_id>/<string:other_user_id>', methods=['PUT'])
@jwt_required()
def mark_messages_as_read(user_id, other_user_id):
    if _forbidden(user_id):
        return { 'message': 'Not authorized to update this conversation' }, 403

    other_user = find_by_id(User, other_user_id)

    if other_user is None:
        return { 'message': 'User not found' }, 404

    updated = Message.objects(receiver=get_current_user(), sender=other_user, read=False).update(set__read=True)

    logger.info('Marked %s messages from %s to %s as read', updated, other_user_id, user_id)
    return { 'message': 'Messages marked as read', 'updated': updated }, 200

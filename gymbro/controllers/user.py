# user.py

import logging

from flask import Blueprint, request
from flask_jwt_extended import get_current_user, jwt_required
from mongoengine import ValidationError

from gymbro.controllers.post import paginated_posts
from gymbro.models.post import Post
from gymbro.models.user import User
from gymbro.services import storage
from gymbro.utils import find_by_id

logger = logging.getLogger(__name__)

user_bp = Blueprint('user_bp', __name__)


# get_current_user_profile()
@user_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_user_profile():
    return { 'user': get_current_user().to_profile() }, 200


# update_profile()
@user_bp.route('/me', methods=['PUT'])
@user_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    user = get_current_user()
    data = request.get_json(silent=True) if request.is_json else request.form
    data = data or {}

    username = (data.get('username') or '').strip()
    bio = data.get('bio')

    if username and username != user.username:
        if User.objects(username=username).first() is not None:
            return { 'message': 'Username is already taken' }, 409
        user.username = username

    if bio is not None:
        user.bio = bio

    old_picture = user.profile_picture
    picture = request.files.get('profilePicture')
    if picture is not None and picture.filename:
        user.profile_picture = storage.save_image(picture, storage.PROFILE, user.pk)

    try:
        user.save()
    except ValidationError:
        if user.profile_picture != old_picture:
            storage.delete_image(user.profile_picture)
        raise

    if user.profile_picture != old_picture:
        storage.delete_image(old_picture)

    logger.info('User %s updated profile', user.pk)
    return {
        'message': 'Profile updated successfully',
        'user': user.to_profile()
    }, 200


# update_profile_picture()
@user_bp.route('/profile-picture', methods=['PUT'])
@jwt_required()
def update_profile_picture():
    user = get_current_user()
    picture = request.files.get('profilePicture')

    if picture is None or not picture.filename:
        return { 'message': 'No profile picture uploaded' }, 400

    old_picture = user.profile_picture
    user.profile_picture = storage.save_image(picture, storage.PROFILE, user.pk)
    user.save()

    storage.delete_image(old_picture)

    logger.info('User %s updated profile picture', user.pk)
    return {
        'message': 'Profile picture updated successfully',
        'profilePicture': user.profile_picture
    }, 200


# get_user_by_username()
@user_bp.route('/username/<string:username>', methods=['GET'])
def get_user_by_username(username):
    user = User.objects(username=username).first()

    if user is None:
        return { 'message': 'User not found' }, 404

    return {
        'id': str(user.pk),
        'username': user.username,
        'profilePicture': user.profile_picture,
        'bio': user.bio
    }, 200


# get_user_posts()
@user_bp.route('/username/<string:username>/posts', methods=['GET'])
@jwt_required(optional=True)
def get_user_posts(username):
    user = User.objects(username=username).first()

    if user is None:
        return { 'message': 'User not found' }, 404

    response = paginated_posts(Post.objects(user=user), get_current_user())
    response['user'] = user.to_summary()

    return response, 200


# get_user()
@user_bp.route('/<string:user_id>', methods=['GET'])
def get_user(user_id):
    user = find_by_id(User, user_id)

    if user is None:
        return { 'message': 'User not found' }, 404

    return user.to_summary(), 200

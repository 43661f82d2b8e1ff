# search.py

from flask import Blueprint, request
from flask_jwt_extended import get_current_user, jwt_required
from mongoengine.queryset.visitor import Q

from gymbro.controllers.post import serialize_posts
from gymbro.models.post import Post
from gymbro.models.user import User

search_bp = Blueprint('search_bp', __name__)

SEARCH_LIMIT = 50


def _query():
    return (request.args.get('q') or '').strip()


# search_users()
@search_bp.route('/users', methods=['GET'])
@jwt_required()
def search_users():
    text = _query()

    if not text:
        return { 'message': 'Search query is required' }, 400

    users = User.objects(Q(username__icontains=text) | Q(email__icontains=text)).order_by('username').limit(SEARCH_LIMIT)

    return { 'users': [user.to_summary() for user in users] }, 200


# search_posts()
@search_bp.route('/posts', methods=['GET'])
@jwt_required()
def search_posts():
    text = _query()

    if not text:
        return { 'message': 'Search query is required' }, 400

    posts = Post.objects(content__icontains=text).order_by('-created_at').limit(SEARCH_LIMIT)

    return { 'posts': serialize_posts(posts, get_current_user()) }, 200

# post.py

import logging

from flask import Blueprint, request
from flask_jwt_extended import get_current_user, jwt_required
from mongoengine import ValidationError

from gymbro.models.like import Like
from gymbro.models.post import Post
from gymbro.services import storage
from gymbro.utils import find_by_id, get_pagination, total_pages

logger = logging.getLogger(__name__)

post_bp = Blueprint('post_bp', __name__)


# FUNCTION liked_post_ids
def liked_post_ids(user, posts):
    if user is None or not posts:
        return set()

    likes = Like.objects(user=user, post__in=posts).only('post').as_pymongo()
    return { str(like['post']) for like in likes }


# FUNCTION serialize_posts
def serialize_posts(posts, viewer=None):
    posts = list(posts)
    liked = liked_post_ids(viewer, posts)

    return [post.to_dict(liked=str(post.pk) in liked if viewer is not None else None) for post in posts]


# FUNCTION paginated_posts
def paginated_posts(queryset, viewer=None):
    page, limit, skip = get_pagination()

    totalPosts = queryset.count()
    posts = serialize_posts(queryset.order_by('-created_at').skip(skip).limit(limit), viewer)

    return {
        'posts': posts,
        'totalPosts': totalPosts,
        'currentPage': page,
        'totalPages': total_pages(totalPosts, limit),
        'hasMore': skip + len(posts) < totalPosts
    }


def _request_data():
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form


# get_all_posts()
@post_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required(optional=True)
def get_all_posts():
    user = get_current_user()
    user_id = request.args.get('userId')
    queryset = Post.objects(user=user_id) if user_id else Post.objects

    return paginated_posts(queryset, user), 200


# get_posts_by_user()
@post_bp.route('/user/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_posts_by_user(user_id):
    user = get_current_user()
    return paginated_posts(Post.objects(user=user_id), user), 200


# get_trending_posts()
@post_bp.route('/trending', methods=['GET'])
@jwt_required(optional=True)
def get_trending_posts():
    user = get_current_user()
    limit = min(max(request.args.get('limit', 10, type=int) or 10, 1), 100)
    posts = Post.objects.order_by('-likes_count', '-created_at').limit(limit)

    return serialize_posts(posts, user), 200


# get_post()
@post_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id):
    user = get_current_user()
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    return { 'post': serialize_posts([post], user)[0] }, 200


# create_post()
@post_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
def create_post():
    user = get_current_user()
    data = _request_data()
    content = (data.get('content') or '').strip()

    if not content:
        return { 'message': 'Post content is required' }, 400

    # only uploaded files, never a path from the body
    image = None

    if 'image' in request.files and request.files['image'].filename:
        image = storage.save_image(request.files['image'], storage.POSTS, user.pk)

    post = Post(content=content, user=user, image=image)
    try:
        post.save()
    except ValidationError:
        storage.delete_image(image)
        raise

    logger.info('User %s created post %s', user.pk, post.pk)
    return post.to_dict(liked=False), 201


# update_post()
@post_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id):
    user = get_current_user()
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    if not post.is_owned_by(user):
        return { 'message': 'Not authorized to update this post' }, 403

    data = _request_data()
    old_image = post.image

    if data.get('content') is not None:
        content = data.get('content').strip()
        if not content:
            return { 'message': 'Post content is required' }, 400
        post.content = content

    if str(data.get('removeImage')).lower() == 'true':
        post.image = None

    elif 'image' in request.files and request.files['image'].filename:
        post.image = storage.save_image(request.files['image'], storage.POSTS, user.pk)

    try:
        post.save()
    except ValidationError:
        if post.image != old_image:
            storage.delete_image(post.image)
        raise

    # old file goes only once the post no longer points at it
    if old_image and post.image != old_image:
        storage.delete_image(old_image)

    logger.info('User %s updated post %s', user.pk, post.pk)
    return serialize_posts([post], user)[0], 200


# delete_post()
@post_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id):
    user = get_current_user()
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    if not post.is_owned_by(user):
        return { 'message': 'Not authorized to delete this post' }, 403

    storage.delete_image(post.image)

    # comments and likes go with the post
    post.delete()

    logger.info('User %s deleted post %s', user.pk, post_id)
    return { 'message': 'Post deleted successfully', 'postId': post_id }, 200

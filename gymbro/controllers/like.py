# like.py

import logging

from flask import Blueprint
from flask_jwt_extended import get_current_user, jwt_required
from mongoengine import NotUniqueError

from gymbro.models.like import Like
from gymbro.models.post import Post
from gymbro.utils import find_by_id, get_pagination, total_pages

logger = logging.getLogger(__name__)

like_bp = Blueprint('like_bp', __name__)


# toggle_like()
@like_bp.route('/post/<string:post_id>', methods=['POST'])
@jwt_required()
def toggle_like(post_id):
    user = get_current_user()
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    like = Like.objects(user=user, post=post).first()

    if like is not None:
        like.delete()
        Post.objects(id=post.pk, likes_count__gt=0).update_one(dec__likes_count=1)
        liked = False
    else:
        try:
            Like(user=user, post=post).save()
        except NotUniqueError:
            # a concurrent request already liked it
            logger.info('Duplicate like from user %s on post %s', user.pk, post.pk)
        else:
            Post.objects(id=post.pk).update_one(inc__likes_count=1)
        liked = True

    post.reload()

    return { 'liked': liked, 'likesCount': post.likes_count }, 200


# check_like_status()
@like_bp.route('/post/<string:post_id>/check', methods=['GET'])
@jwt_required()
def check_like_status(post_id):
    user = get_current_user()
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    return { 'liked': Like.objects(user=user, post=post).first() is not None }, 200


# get_likes_by_post()
@like_bp.route('/post/<string:post_id>/users', methods=['GET'])
def get_likes_by_post(post_id):
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    page, limit, skip = get_pagination()

    queryset = Like.objects(post=post)
    total = queryset.count()
    users = [like.user.to_summary() for like in queryset.order_by('-created_at').skip(skip).limit(limit)]

    return {
        'users': users,
        'pagination': {
            'total': total,
            'page': page,
            'limit': limit,
            'pages': total_pages(total, limit)
        }
    }, 200

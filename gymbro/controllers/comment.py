# comment.py

import logging

from flask import Blueprint, request
from flask_jwt_extended import get_current_user, jwt_required

from gymbro.models.comment import Comment
from gymbro.models.post import Post
from gymbro.utils import find_by_id, get_pagination, total_pages

logger = logging.getLogger(__name__)

comment_bp = Blueprint('comment_bp', __name__)


def _content():
    data = request.get_json(silent=True) or request.form
    return (data.get('content') or '').strip()


# create_comment()
@comment_bp.route('/post/<string:post_id>', methods=['POST'])
@jwt_required()
def create_comment(post_id):
    user = get_current_user()
    content = _content()

    if not content:
        return { 'message': 'Comment content is required' }, 400

    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    comment = Comment(content=content, user=user, post=post)
    comment.save()

    # denormalized counter
    Post.objects(id=post.pk).update_one(inc__comments_count=1)
    post.reload()

    response = comment.to_dict()
    response['commentsCount'] = post.comments_count

    logger.info('User %s commented on post %s', user.pk, post.pk)
    return response, 201


# get_comments_by_post()
@comment_bp.route('/post/<string:post_id>', methods=['GET'])
def get_comments_by_post(post_id):
    post = find_by_id(Post, post_id)

    if post is None:
        return { 'message': 'Post not found' }, 404

    page, limit, skip = get_pagination()

    queryset = Comment.objects(post=post)
    totalComments = queryset.count()
    comments = [comment.to_dict() for comment in queryset.order_by('-created_at').skip(skip).limit(limit)]

    return {
        'comments': comments,
        'totalComments': totalComments,
        'currentPage': page,
        'totalPages': total_pages(totalComments, limit),
        'hasMore': skip + len(comments) < totalComments
    }, 200


# get_comment()
@comment_bp.route('/<string:comment_id>', methods=['GET'])
def get_comment(comment_id):
    comment = find_by_id(Comment, comment_id)

    if comment is None:
        return { 'message': 'Comment not found' }, 404

    return comment.to_dict(), 200


# update_comment()
@comment_bp.route('/<string:comment_id>', methods=['PUT'])
@jwt_required()
def update_comment(comment_id):
    user = get_current_user()
    content = _content()

    if not content:
        return { 'message': 'Comment content is required' }, 400

    comment = find_by_id(Comment, comment_id)

    if comment is None:
        return { 'message': 'Comment not found' }, 404

    if not comment.is_owned_by(user):
        return { 'message': 'Not authorized to update this comment' }, 403

    comment.content = content
    comment.save()

    return comment.to_dict(), 200


# delete_comment()
@comment_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id):
    user = get_current_user()
    comment = find_by_id(Comment, comment_id)

    if comment is None:
        return { 'message': 'Comment not found' }, 404

    if not comment.is_owned_by(user):
        return { 'message': 'Not authorized to delete this comment' }, 403

    post_id = comment.post.pk if comment.post else None
    comment.delete()

    if post_id is not None:
        Post.objects(id=post_id, comments_count__gt=0).update_one(dec__comments_count=1)

    logger.info('User %s deleted comment %s', user.pk, comment_id)
    return { 'message': 'Comment deleted successfully' }, 200

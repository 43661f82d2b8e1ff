# like.py

import mongoengine
from mongoengine import DateTimeField, Document, ReferenceField

from gymbro.models.post import Post
from gymbro.models.user import User
from gymbro.utils import utcnow


class Like(Document):
    user = ReferenceField(User, required=True, unique_with='post', reverse_delete_rule=mongoengine.CASCADE)
    post = ReferenceField(Post, required=True, reverse_delete_rule=mongoengine.CASCADE)
    created_at = DateTimeField(default=utcnow)

    meta = { 'indexes': ['post'] }

# comment.py

import mongoengine
from mongoengine import DateTimeField, Document, ReferenceField, StringField

from gymbro.models.post import Post
from gymbro.models.user import User
from gymbro.utils import isoformat, utcnow


class Comment(Document):
    content = StringField(required=True, max_length=500)
    user = ReferenceField(User, required=True, reverse_delete_rule=mongoengine.CASCADE)
    post = ReferenceField(Post, required=True, reverse_delete_rule=mongoengine.CASCADE)
    created_at = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)

    meta = { 'indexes': [('post', '-created_at')] }

    def clean(self):
        self.updated_at = utcnow()

    def is_owned_by(self, user):
        return self.user is not None and self.user.pk == user.pk

    def to_dict(self):
        return {
            'id': str(self.pk),
            'content': self.content,
            'post': str(self.post.pk) if self.post else None,
            'user': self.user.to_summary() if self.user else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }

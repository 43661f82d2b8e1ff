# post.py

import mongoengine
from mongoengine import DateTimeField, Document, IntField, ReferenceField, StringField

from gymbro.models.user import User
from gymbro.services.storage import normalize_image_path
from gymbro.utils import isoformat, utcnow


class Post(Document):
    content = StringField(required=True, max_length=1000)
    image = StringField()
    user = ReferenceField(User, required=True, reverse_delete_rule=mongoengine.CASCADE)
    likes_count = IntField(default=0)
    comments_count = IntField(default=0)
    created_at = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)

    meta = { 'indexes': ['user', '-created_at', '-likes_count'] }

    def clean(self):
        self.updated_at = utcnow()

    def is_owned_by(self, user):
        return self.user is not None and self.user.pk == user.pk

    def to_dict(self, liked=None):
        post = {
            'id': str(self.pk),
            '_id': str(self.pk),
            'content': self.content,
            'image': normalize_image_path(self.image),
            'user': self.user.to_summary() if self.user else None,
            'likesCount': self.likes_count or 0,
            'commentsCount': self.comments_count or 0,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }

        if liked is not None:
            post['liked'] = liked

        return post

# user.py

from mongoengine import DateTimeField, Document, EmailField, StringField

from gymbro.extensions import bcrypt
from gymbro.utils import isoformat, utcnow


class User(Document):
    username = StringField(required=True, max_length=30, unique=True)
    email = EmailField(required=True, unique=True)
    password = StringField(required=True)
    profile_picture = StringField(default='')
    bio = StringField(default='', max_length=500)
    google_id = StringField()
    created_at = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)

    meta = { 'indexes': ['google_id'] }

    def clean(self):
        self.updated_at = utcnow()

    # createPassword()
    @staticmethod
    def createPassword(password):
        return bcrypt.generate_password_hash(password).decode('utf-8')

    # verifyPassword()
    def verifyPassword(self, password):
        return bcrypt.check_password_hash(self.password, password)

    # summary used inside posts, comments, likes and messages
    def to_summary(self):
        return {
            'id': str(self.pk),
            'username': self.username,
            'profilePicture': self.profile_picture
        }

    def to_auth(self):
        return {
            'id': str(self.pk),
            'username': self.username,
            'email': self.email,
            'profilePicture': self.profile_picture
        }

    def to_profile(self):
        return {
            'id': str(self.pk),
            'username': self.username,
            'email': self.email,
            'profilePicture': self.profile_picture,
            'bio': self.bio or '',
            'createdAt': isoformat(self.created_at)
        }

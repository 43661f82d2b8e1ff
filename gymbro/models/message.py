# message.py

import mongoengine
from mongoengine import BooleanField, DateTimeField, Document, ReferenceField, StringField

from gymbro.models.user import User
from gymbro.utils import isoformat, utcnow


class Message(Document):
    sender = ReferenceField(User, required=True, reverse_delete_rule=mongoengine.CASCADE)
    receiver = ReferenceField(User, required=True, reverse_delete_rule=mongoengine.CASCADE)
    content = StringField(required=True, max_length=2000)
    read = BooleanField(default=False)
    timestamp = DateTimeField(default=utcnow)

    meta = { 'indexes': [('sender', 'receiver', 'timestamp')] }

    def to_dict(self):
        return {
            'id': str(self.pk),
            'sender': self.sender.to_summary(),
            'receiver': self.receiver.to_summary(),
            'content': self.content,
            'read': self.read,
            'timestamp': isoformat(self.timestamp)
        }

from playsib import db
from flask_login import UserMixin
from datetime import datetime, timezone
import json

GAME_MODES = ('SINGLE', 'DUEL')
SUBMISSION_STATUSES = ('PENDING', 'APPROVED', 'REJECTED')


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    nickname = db.Column(db.String(20), unique=True, nullable=False, index=True)
    high_score = db.Column(db.Integer, default=0, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    scores = db.relationship('Score', back_populates='user', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'nickname': self.nickname,
            'high_score': self.high_score,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(128), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    options_json = db.Column('options', db.Text, nullable=False)  # JSON-encoded list of 4 strings
    answer = db.Column(db.String(256), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    @property
    def options(self):
        try:
            return json.loads(self.options_json or '[]')
        except ValueError:
            return []

    @options.setter
    def options(self, value):
        self.options_json = json.dumps(list(value))

    def to_dict(self):
        return {
            'id': self.id,
            'category': self.category,
            'text': self.text,
            'options': self.options,
            'answer': self.answer,
        }


class Score(db.Model):
    __tablename__ = 'score'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    value = db.Column(db.Integer, nullable=False)
    game_mode = db.Column(db.String(16), default='SINGLE', nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    user = db.relationship('User', back_populates='scores')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'value': self.value,
            'game_mode': self.game_mode,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class SubmittedQuestion(db.Model):
    __tablename__ = 'submitted_question'
    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(128), nullable=False)
    text = db.Column(db.Text, nullable=False)
    options = db.Column(db.Text, nullable=False)  # JSON-encoded list
    answer = db.Column(db.String(256), nullable=False)
    status = db.Column(db.String(16), default='PENDING', nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'category': self.category,
            'text': self.text,
            'options': json.loads(self.options) if self.options else [],
            'answer': self.answer,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

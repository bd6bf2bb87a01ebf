from flask import Blueprint, jsonify, request, current_app
from flask_login import login_user, logout_user, login_required, current_user
from playsib import db
from playsib.models import User, Score

users = Blueprint('users', __name__)

MAX_NICKNAME_LEN = 20


def _clean_nickname(data):
    nickname = (data.get('nickname') or '').strip()
    if not nickname or len(nickname) > MAX_NICKNAME_LEN:
        return None
    return nickname


@users.route('', methods=['POST'])
def get_or_create_user():
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    # A returning player keeps their id from local storage
    if user_id is not None:
        existing = db.session.get(User, user_id)
        if existing:
            login_user(existing, remember=True)
            return jsonify(existing.to_dict())

    nickname = _clean_nickname(data)
    if nickname is None:
        return jsonify({'error': f'Nickname must be 1-{MAX_NICKNAME_LEN} characters'}), 400
    if User.query.filter_by(nickname=nickname).first():
        return jsonify({'error': 'Nickname is already taken'}), 409

    new_user = User(nickname=nickname)
    db.session.add(new_user)
    db.session.commit()
    login_user(new_user, remember=True)
    current_app.logger.info(f"[user-create] id={new_user.id} nickname={nickname!r}")
    return jsonify(new_user.to_dict()), 201


@users.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_user.to_dict())


@users.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@users.route('/<int:user_id>', methods=['GET'])
def get_profile(user_id):
    user = db.get_or_404(User, user_id)
    recent = user.scores.order_by(Score.created_at.desc(), Score.id.desc()).limit(10).all()
    payload = user.to_dict()
    payload['scores'] = [s.to_dict() for s in recent]
    return jsonify(payload)


@users.route('/<int:user_id>', methods=['PATCH'])
def update_nickname(user_id):
    data = request.get_json(silent=True) or {}
    user = db.get_or_404(User, user_id)
    nickname = _clean_nickname(data)
    if nickname is None:
        return jsonify({'error': f'Nickname must be 1-{MAX_NICKNAME_LEN} characters'}), 400
    taken = User.query.filter_by(nickname=nickname).first()
    if taken and taken.id != user.id:
        return jsonify({'error': 'Nickname is already taken'}), 409
    user.nickname = nickname
    db.session.add(user)
    db.session.commit()
    return jsonify(user.to_dict())

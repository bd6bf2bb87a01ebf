from flask import Blueprint, jsonify, request, current_app
from playsib import db
from playsib.errors import ValidationFailure
from playsib.services.scoring import submit_score, score_history, score_stats

scores = Blueprint('scores', __name__)


@scores.route('', methods=['POST'])
def submit():
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    value = data.get('value')
    if user_id is None or not isinstance(value, int) or isinstance(value, bool):
        raise ValidationFailure('user_id and an integer value are required')
    score = submit_score(
        db.session,
        user_id,
        value,
        data.get('game_mode') or 'SINGLE',
        logger=current_app.logger,
    )
    return jsonify(score.to_dict()), 201


@scores.route('/<int:user_id>/history', methods=['GET'])
def history(user_id):
    game_mode = request.args.get('game_mode')
    limit = request.args.get('limit', 20, type=int)
    return jsonify([s.to_dict() for s in score_history(db.session, user_id, game_mode, limit)])


@scores.route('/<int:user_id>/stats', methods=['GET'])
def stats(user_id):
    return jsonify(score_stats(db.session, user_id))

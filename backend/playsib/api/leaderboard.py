from datetime import timedelta
from flask import Blueprint, jsonify, request, current_app
from playsib import db
from playsib.errors import ValidationFailure
from playsib.models import GAME_MODES
from playsib.services import ranking

leaderboard = Blueprint('leaderboard', __name__)


def _limit():
    return request.args.get('limit', current_app.config.get('LEADERBOARD_LIMIT', 50), type=int)


def _game_mode():
    mode = request.args.get('game_mode')
    if mode and mode not in GAME_MODES:
        raise ValidationFailure(f"Unknown game mode '{mode}'")
    return mode or None


def _window():
    return timedelta(days=int(current_app.config.get('WEEKLY_WINDOW_DAYS', 7)))


@leaderboard.route('/global', methods=['GET'])
def get_global():
    return jsonify(ranking.global_top(db.session, _limit(), _game_mode()))


@leaderboard.route('/weekly', methods=['GET'])
def get_weekly():
    return jsonify(ranking.weekly_top(db.session, _limit(), _game_mode(), window=_window()))


@leaderboard.route('/users/<int:user_id>/rank', methods=['GET'])
def get_user_rank(user_id):
    return jsonify(ranking.user_rank(db.session, user_id, window=_window()))


@leaderboard.route('/users/<int:user_id>/around', methods=['GET'])
def get_around_user(user_id):
    range_ = request.args.get('range', current_app.config.get('AROUND_RANGE', 5), type=int)
    return jsonify(ranking.users_around(db.session, user_id, range_))

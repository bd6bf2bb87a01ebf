"""Leaderboard queries.

All queries are read-only and take the SQLAlchemy session to read from.
Ties on equal scores are broken by the earliest timestamp, then the lowest id,
so every listing is deterministic.
"""
from datetime import timedelta
from typing import Optional

from sqlalchemy import func

from playsib.errors import NotFound
from playsib.models import Score, User, utcnow

WEEKLY_WINDOW = timedelta(days=7)


def _require_user(session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


def _window_start(now=None, window: timedelta = WEEKLY_WINDOW):
    return (now or utcnow()) - window


def global_top(session, limit: int = 50, game_mode: Optional[str] = None):
    """Top users by all-time best score.

    Without a game mode this is the stored ``high_score``. With one, only
    users who have played that mode are ranked, by their best score in it.
    """
    if game_mode is None:
        users = (
            session.query(User)
            .order_by(User.high_score.desc(), User.created_at.asc(), User.id.asc())
            .limit(limit)
            .all()
        )
        rows = [(u, u.high_score) for u in users]
    else:
        best = (
            session.query(Score.user_id.label('user_id'), func.max(Score.value).label('best'))
            .filter(Score.game_mode == game_mode)
            .group_by(Score.user_id)
            .subquery()
        )
        rows = (
            session.query(User, best.c.best)
            .join(best, best.c.user_id == User.id)
            .order_by(best.c.best.desc(), User.created_at.asc(), User.id.asc())
            .limit(limit)
            .all()
        )
    return [
        {
            'id': user.id,
            'nickname': user.nickname,
            'high_score': score,
            'created_at': user.created_at.isoformat() if user.created_at else None,
            'rank': index + 1,
        }
        for index, (user, score) in enumerate(rows)
    ]


def weekly_top(session, limit: int = 50, game_mode: Optional[str] = None, now=None,
               window: timedelta = WEEKLY_WINDOW):
    """Top users by their best score within the trailing window.

    A score exactly ``window`` old is still inside it. When a user has the
    same best value more than once, the earliest of those scores is kept.
    """
    q = (
        session.query(Score, User.nickname)
        .join(User, User.id == Score.user_id)
        .filter(Score.created_at >= _window_start(now, window))
    )
    if game_mode:
        q = q.filter(Score.game_mode == game_mode)
    q = q.order_by(Score.value.desc(), Score.created_at.asc(), Score.id.asc())

    best_by_user = {}
    for score, nickname in q.all():
        if score.user_id not in best_by_user:
            best_by_user[score.user_id] = (score, nickname)

    leaders = sorted(
        best_by_user.values(),
        key=lambda pair: (-pair[0].value, pair[0].created_at, pair[0].user_id),
    )[:limit]
    return [
        {
            'id': score.user_id,
            'nickname': nickname,
            'score': score.value,
            'date': score.created_at.isoformat(),
            'rank': index + 1,
        }
        for index, (score, nickname) in enumerate(leaders)
    ]


def user_rank(session, user_id: int, now=None, window: timedelta = WEEKLY_WINDOW) -> dict:
    """Global and weekly rank of one user.

    The weekly rank counts in-window score rows (not users) that beat the
    user's weekly best; it is None when the user has not played this week.
    """
    user = _require_user(session, user_id)
    better_users = session.query(func.count(User.id)).filter(User.high_score > user.high_score).scalar()

    since = _window_start(now, window)
    weekly_best = (
        session.query(func.max(Score.value))
        .filter(Score.user_id == user.id, Score.created_at >= since)
        .scalar()
    )
    weekly_rank = None
    if weekly_best is not None:
        better_scores = (
            session.query(func.count(Score.id))
            .filter(Score.value > weekly_best, Score.created_at >= since)
            .scalar()
        )
        weekly_rank = better_scores + 1

    return {
        'user_id': user.id,
        'nickname': user.nickname,
        'global_rank': better_users + 1,
        'weekly_rank': weekly_rank,
        'global_score': user.high_score,
        'weekly_score': weekly_best or 0,
    }


def users_around(session, user_id: int, range_: int = 5):
    """The user plus up to ``range_`` neighbours strictly above and below.

    Ranks are positions within the returned slice, not global ranks.
    """
    user = _require_user(session, user_id)
    range_ = max(0, int(range_))

    above = (
        session.query(User)
        .filter(User.high_score > user.high_score)
        .order_by(User.high_score.asc(), User.created_at.desc(), User.id.desc())
        .limit(range_)
        .all()
    ) if range_ else []
    below = (
        session.query(User)
        .filter(User.high_score < user.high_score)
        .order_by(User.high_score.desc(), User.created_at.asc(), User.id.asc())
        .limit(range_)
        .all()
    ) if range_ else []

    merged = sorted(above + [user] + below, key=lambda u: (-u.high_score, u.created_at, u.id))
    return [
        {
            'id': u.id,
            'nickname': u.nickname,
            'high_score': u.high_score,
            'rank': index + 1,
            'is_current': u.id == user.id,
        }
        for index, u in enumerate(merged)
    ]

from datetime import timedelta
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError

from playsib.errors import NotFound, PersistenceFailure, ValidationFailure
from playsib.models import GAME_MODES, Score, User, utcnow


def submit_score(session, user_id: int, value: int, game_mode: str = 'SINGLE', logger=None) -> Score:
    """Persist a finished game's score and raise the user's high score if beaten.

    The Score row is committed first; the high score is then raised with a
    conditional UPDATE so a concurrent, larger submission is never lowered.
    Store errors are rolled back and raised as PersistenceFailure.
    """
    if value is None or int(value) < 0:
        raise ValidationFailure('Score value must be a non-negative integer')
    if game_mode not in GAME_MODES:
        raise ValidationFailure(f"Unknown game mode '{game_mode}'")
    value = int(value)

    try:
        user = session.get(User, user_id)
        if user is None:
            raise NotFound('User not found')
        score = Score(user_id=user.id, value=value, game_mode=game_mode)
        session.add(score)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        if logger is not None:
            logger.error(f"[score-submit] user={user_id} value={value} failed: {exc}")
        raise PersistenceFailure('Score could not be saved') from exc

    score_id = score.id
    try:
        current_high = session.query(User.high_score).filter(User.id == user.id).scalar() or 0
        if value > current_high:
            session.execute(
                update(User)
                .where(User.id == user.id, User.high_score < value)
                .values(high_score=value)
            )
            session.commit()
            session.refresh(user)
    except SQLAlchemyError as exc:
        session.rollback()
        if logger is not None:
            logger.error(f"[score-submit] user={user_id} score={score_id} saved, high score update failed: {exc}")
        raise PersistenceFailure('Score was saved but the high score could not be updated') from exc

    if logger is not None:
        logger.info(f"[score-submit] user={user_id} value={value} mode={game_mode} high_score={user.high_score}")
    return score


def _require_user(session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


def score_history(session, user_id: int, game_mode: Optional[str] = None, limit: int = 20):
    _require_user(session, user_id)
    q = session.query(Score).filter(Score.user_id == user_id)
    if game_mode:
        q = q.filter(Score.game_mode == game_mode)
    return q.order_by(Score.created_at.desc(), Score.id.desc()).limit(limit).all()


def score_stats(session, user_id: int, now=None, window_days: int = 7) -> dict:
    _require_user(session, user_id)
    now = now or utcnow()
    total, avg, best = (
        session.query(func.count(Score.id), func.avg(Score.value), func.max(Score.value))
        .filter(Score.user_id == user_id)
        .one()
    )
    recent = (
        session.query(func.count(Score.id))
        .filter(Score.user_id == user_id, Score.created_at >= now - timedelta(days=window_days))
        .scalar()
    )
    return {
        'total_games': total or 0,
        'average_score': int(round(avg)) if avg is not None else 0,
        'best_score': best or 0,
        'recent_games': recent or 0,
    }

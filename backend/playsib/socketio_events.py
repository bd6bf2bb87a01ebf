from flask_socketio import emit
from flask import current_app, request
from playsib import socketio, db
from playsib.errors import NotFound
from playsib.models import User
from playsib.api.questions import load_active_questions
from playsib.services.game import GameSession
from playsib.services.scoring import submit_score
from typing import Dict

NAMESPACE = '/ws'

# One live single-player session per socket
_sessions: Dict[str, GameSession] = {}
# Bumped whenever a socket's session is replaced or torn down; stale tickers exit on mismatch
_generation: Dict[str, int] = {}

_EVENT_NAMES = {
    'spin': 'spin_result',
    'question': 'question',
    'graded': 'graded',
    'category_ready': 'state_update',
    'ended': 'session_ended',
}


def _get_sid() -> str:
    return request.sid  # type: ignore


def _build_session(app, sid: str, user_id: int) -> GameSession:
    cfg = app.config

    def load(category):
        return [q.to_dict() for q in load_active_questions(category)]

    def submit(value):
        return submit_score(db.session, user_id, value, 'SINGLE', logger=app.logger)

    def forward(name, payload):
        if name == 'category_ready':
            session = _sessions.get(sid)
            payload = session.snapshot() if session else payload
        socketio.emit(_EVENT_NAMES.get(name, name), payload, to=sid, namespace=NAMESPACE)

    return GameSession(
        cfg['CATEGORIES'],
        load,
        submit,
        session_duration=int(cfg.get('SESSION_DURATION_SEC', 300)),
        question_duration=int(cfg.get('QUESTION_DURATION_SEC', 20)),
        reveal_delay=int(cfg.get('REVEAL_DELAY_SEC', 2)),
        points_per_correct=int(cfg.get('POINTS_PER_CORRECT', 10)),
        min_spins=int(cfg.get('WHEEL_MIN_SPINS', 4)),
        max_spins=int(cfg.get('WHEEL_MAX_SPINS', 7)),
        on_event=forward,
        logger=app.logger,
    )


def _teardown(sid: str) -> None:
    _generation[sid] = _generation.get(sid, 0) + 1
    session = _sessions.pop(sid, None)
    if session is not None:
        session.close()


def _start_ticker(app, sid: str) -> None:
    """Tick the socket's session once per second until it ends or is replaced.

    No-ops in TESTING mode; tests drive ``GameSession.tick`` directly.
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_TICKER_IN_TESTS'):
        return
    generation = _generation.get(sid, 0)
    own_session = _sessions.get(sid)

    def _worker(expected_generation: int, session: GameSession):
        try:
            hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0))
        except (TypeError, ValueError):
            hb = 0
        elapsed = 0
        while True:
            socketio.sleep(1)
            elapsed += 1
            if _generation.get(sid) != expected_generation or _sessions.get(sid) is not session:
                app.logger.info(f"[tick-abort] sid={sid} generation={expected_generation} superseded")
                return
            with app.app_context():
                session.tick()
                socketio.emit('state_update', session.snapshot(), to=sid, namespace=NAMESPACE)
            if hb and elapsed % hb == 0:
                app.logger.info(
                    f"[tick-heartbeat] sid={sid} state={session.state} remaining={session.session_timer.remaining}s"
                )
            if session.ended or session.closed:
                return

    socketio.start_background_task(_worker, generation, own_session)


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(*args):
    _teardown(_get_sid())
    _generation.pop(_get_sid(), None)


def handle_start_session(data):
    user_id = (data or {}).get('user_id')
    if user_id is None or db.session.get(User, user_id) is None:
        emit('error', {'message': 'A valid user_id is required'})
        return
    sid = _get_sid()
    app = current_app._get_current_object()
    # Starting again is "play again": the previous session and its ticker are discarded
    _teardown(sid)
    session = _build_session(app, sid, int(user_id))
    _sessions[sid] = session
    app.logger.info(f"[session-start] sid={sid} user={user_id} duration={session.session_timer.duration}s")
    emit('state_update', session.snapshot())
    _start_ticker(app, sid)


def handle_spin(data=None):
    session = _sessions.get(_get_sid())
    if session is None:
        emit('error', {'message': 'No active session'})
        return
    try:
        result = session.spin()
    except NotFound as exc:
        emit('error', {'message': exc.message})
        emit('state_update', session.snapshot())
        return
    if result is None:
        emit('spin_rejected', {'state': session.state})
        return
    emit('state_update', session.snapshot())


def handle_answer(data):
    session = _sessions.get(_get_sid())
    if session is None:
        emit('error', {'message': 'No active session'})
        return
    outcome = session.submit_answer((data or {}).get('choice'))
    if outcome is None:
        emit('answer_rejected', {'state': session.state})
        return
    emit('state_update', session.snapshot())


def handle_leave_session(data=None):
    _teardown(_get_sid())
    emit('left', {'message': 'Session discarded'})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('start_session', handle_start_session, namespace=ns)
        socketio.on_event('spin', handle_spin, namespace=ns)
        socketio.on_event('answer', handle_answer, namespace=ns)
        socketio.on_event('leave_session', handle_leave_session, namespace=ns)

import random

from sqlalchemy.exc import OperationalError

from playsib import db
from playsib.models import Score, User
from playsib.services.game import GameSession
from playsib.services.scoring import submit_score


def test_submit_raises_high_score_only_when_beaten(client, make_user):
    u = make_user('alice', 100)
    res = client.post('/api/scores', json={'user_id': u.id, 'value': 50})
    assert res.status_code == 201
    assert res.get_json()['game_mode'] == 'SINGLE'
    assert db.session.get(User, u.id).high_score == 100

    res = client.post('/api/scores', json={'user_id': u.id, 'value': 150})
    assert res.status_code == 201
    db.session.expire_all()
    assert db.session.get(User, u.id).high_score == 150
    assert Score.query.filter_by(user_id=u.id).count() == 2


def test_submit_rejects_bad_input(client, make_user):
    u = make_user('alice')
    assert client.post('/api/scores', json={'user_id': 999, 'value': 10}).status_code == 404
    assert client.post('/api/scores', json={'user_id': u.id, 'value': -10}).status_code == 400
    assert client.post('/api/scores', json={'user_id': u.id, 'value': 'ten'}).status_code == 400
    res = client.post('/api/scores', json={'user_id': u.id, 'value': 10, 'game_mode': 'TEAM'})
    assert res.status_code == 400
    assert 'error' in res.get_json()
    assert Score.query.count() == 0


def test_store_failure_is_reported(client, make_user, monkeypatch):
    u = make_user('alice')

    def boom():
        raise OperationalError('INSERT', {}, Exception('database is locked'))

    monkeypatch.setattr(db.session, 'commit', boom)
    res = client.post('/api/scores', json={'user_id': u.id, 'value': 30})
    assert res.status_code == 503
    assert res.get_json() == {'error': 'Score could not be saved'}


def test_high_score_failure_after_score_saved(client, make_user, monkeypatch):
    u = make_user('hs_fail', high_score=5)
    user_id = u.id
    real_commit = db.session.commit
    calls = []

    def second_commit_fails():
        calls.append(1)
        if len(calls) == 1:
            return real_commit()
        raise OperationalError('UPDATE', {}, Exception('database is locked'))

    monkeypatch.setattr(db.session, 'commit', second_commit_fails)
    res = client.post('/api/scores', json={'user_id': user_id, 'value': 30})
    assert res.status_code == 503
    assert res.get_json() == {'error': 'Score was saved but the high score could not be updated'}
    monkeypatch.undo()

    assert Score.query.filter_by(user_id=user_id).count() == 1
    assert db.session.get(User, user_id).high_score == 5


def test_history_and_stats(client, make_user):
    u = make_user('alice')
    for value in (10, 20, 40):
        client.post('/api/scores', json={'user_id': u.id, 'value': value})
    client.post('/api/scores', json={'user_id': u.id, 'value': 30, 'game_mode': 'DUEL'})

    history = client.get(f'/api/scores/{u.id}/history').get_json()
    assert [h['value'] for h in history] == [30, 40, 20, 10]
    singles = client.get(f'/api/scores/{u.id}/history?game_mode=SINGLE&limit=2').get_json()
    assert [h['value'] for h in singles] == [40, 20]

    stats = client.get(f'/api/scores/{u.id}/stats').get_json()
    assert stats == {'total_games': 4, 'average_score': 25, 'best_score': 40, 'recent_games': 4}
    assert client.get('/api/scores/999/stats').status_code == 404


def test_two_sessions_submit_independently(flask_app, seeded, make_user):
    from playsib.api.questions import load_active_questions

    alice = make_user('alice', 5)
    bob = make_user('bob', 500)

    def build(user, answer_right):
        s = GameSession(
            seeded,
            lambda c: load_active_questions(c),
            lambda value: submit_score(db.session, user.id, value),
            session_duration=30,
            rng=random.Random(user.id),
        )
        return s, answer_right

    sessions = [build(alice, True), build(bob, True)]
    while not all(s.ended for s, _ in sessions):
        for s, right in sessions:
            if s.state == 'awaiting_category':
                s.spin()
            if s.state == 'awaiting_answer' and right:
                s.submit_answer(s.question['answer'])
            s.tick()

    db.session.expire_all()
    a_scores = Score.query.filter_by(user_id=alice.id).all()
    b_scores = Score.query.filter_by(user_id=bob.id).all()
    assert len(a_scores) == 1 and len(b_scores) == 1
    assert a_scores[0].value == sessions[0][0].score > 5
    assert db.session.get(User, alice.id).high_score == a_scores[0].value
    # Bob's earlier best is higher than anything a 30s session can reach
    assert db.session.get(User, bob.id).high_score == 500

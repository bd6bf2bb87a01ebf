import sqlalchemy as sa
from flask_migrate import downgrade, upgrade

from conftest import TestConfig
from playsib import create_app, db, MIGRATIONS_DIR


def _file_backed_app(tmp_path):
    class MigrationConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'migrated.db'}"

    return create_app(MigrationConfig)


def test_initial_migration_creates_every_table(tmp_path):
    application = _file_backed_app(tmp_path)
    with application.app_context():
        upgrade(directory=MIGRATIONS_DIR)
        insp = sa.inspect(db.engine)
        tables = set(insp.get_table_names())
        assert {'user', 'question', 'score', 'submitted_question'} <= tables

        user_indexes = {ix['name']: ix for ix in insp.get_indexes('user')}
        assert user_indexes['ix_user_nickname']['unique']
        assert 'ix_user_high_score' in user_indexes
        score_indexes = {ix['name'] for ix in insp.get_indexes('score')}
        assert {'ix_score_user_id', 'ix_score_created_at'} <= score_indexes
        assert {c['name'] for c in insp.get_columns('question')} >= {'options', 'is_active'}

        downgrade(directory=MIGRATIONS_DIR, revision='base')
        remaining = set(sa.inspect(db.engine).get_table_names())
        assert not remaining & {'user', 'question', 'score', 'submitted_question'}
        db.session.remove()
        db.engine.dispose()


def test_migrated_schema_accepts_models(tmp_path):
    from playsib.models import Question, Score, User

    application = _file_backed_app(tmp_path)
    with application.app_context():
        upgrade(directory=MIGRATIONS_DIR)
        user = User(nickname='migrated')
        db.session.add(user)
        db.session.commit()
        db.session.add(Score(user_id=user.id, value=30))
        db.session.add(Question(category='History', text='Q?', options=['a', 'b', 'c', 'd'], answer='a'))
        db.session.commit()
        assert Score.query.filter_by(user_id=user.id).count() == 1
        assert user.high_score == 0
        db.session.remove()
        db.engine.dispose()

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
import os
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'migrations')
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db, directory=MIGRATIONS_DIR)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from playsib.errors import GameError

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify({'error': exc.message}), exc.status_code

    from playsib.api.users import users
    flask_app.register_blueprint(users, url_prefix='/api/users')

    from playsib.api.questions import questions
    flask_app.register_blueprint(questions, url_prefix='/api/questions')

    from playsib.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api/scores')

    from playsib.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    # Live single-player sessions over Socket.IO
    from playsib.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from playsib.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the question bank."""
        from playsib.seed import seed_questions
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            count = seed_questions(db.session, flask_app.config['CATEGORIES'])
            print(f'Database has been reset and seeded with {count} questions!')

    @click.command('check-db')
    def check_db_command():
        """Reports active question counts per category."""
        from playsib.models import Question
        with flask_app.app_context():
            counts = {c: 0 for c in flask_app.config['CATEGORIES']}
            for q in Question.query.filter_by(is_active=True).all():
                counts[q.category] = counts.get(q.category, 0) + 1
            total = sum(counts.values())
            print(f'Found {total} active questions')
            for category, count in counts.items():
                marker = 'ok' if count else 'EMPTY'
                print(f'  - {category}: {count} [{marker}]')
            if total == 0:
                flask_app.logger.warning("[check-db] no active questions, run `flask db-reset` to seed")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(check_db_command)

    return flask_app

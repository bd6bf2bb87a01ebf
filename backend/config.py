import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///playsib.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Game loop timers (seconds)
    SESSION_DURATION_SEC = int(os.environ.get('SESSION_DURATION_SEC', '300'))
    QUESTION_DURATION_SEC = int(os.environ.get('QUESTION_DURATION_SEC', '20'))
    REVEAL_DELAY_SEC = int(os.environ.get('REVEAL_DELAY_SEC', '2'))
    POINTS_PER_CORRECT = int(os.environ.get('POINTS_PER_CORRECT', '10'))
    # Extra full turns drawn per wheel spin (inclusive)
    WHEEL_MIN_SPINS = int(os.environ.get('WHEEL_MIN_SPINS', '4'))
    WHEEL_MAX_SPINS = int(os.environ.get('WHEEL_MAX_SPINS', '7'))
    # Leaderboards
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '50'))
    AROUND_RANGE = int(os.environ.get('AROUND_RANGE', '5'))
    WEEKLY_WINDOW_DAYS = int(os.environ.get('WEEKLY_WINDOW_DAYS', '7'))
    # Wheel segments, in order from 12 o'clock clockwise
    CATEGORIES = [
        'Life of the social estates',
        'Merchant household',
        'Famous merchant dynasties',
        'Tomsk, a great Siberian trading centre',
        'Growth of enterprise',
    ]
    # Optional: heartbeat interval for session ticker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))

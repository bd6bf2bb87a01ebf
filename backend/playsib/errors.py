class GameError(Exception):
    """Base error for game and leaderboard operations.

    Carries the HTTP status used when the error escapes a route.
    """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(GameError):
    status_code = 400


class NotFound(GameError):
    status_code = 404


class PersistenceFailure(GameError):
    status_code = 503

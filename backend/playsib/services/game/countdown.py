class Countdown:
    """Whole-second countdown driven by external ticks.

    The owner calls ``tick()`` once per elapsed second; nothing here sleeps
    or schedules. ``tick()`` reports expiry exactly once, after which the
    countdown stops until it is started again.
    """

    def __init__(self, duration: int):
        if duration < 1:
            raise ValueError('duration must be at least 1 second')
        self.duration = int(duration)
        self.remaining = self.duration
        self.running = False

    def start(self) -> None:
        self.remaining = self.duration
        self.running = True

    def reset(self) -> None:
        """Restore the full budget without starting."""
        self.remaining = self.duration
        self.running = False

    def cancel(self) -> None:
        self.running = False

    def tick(self) -> bool:
        """Advance one second. Returns True on the tick that reaches zero."""
        if not self.running:
            return False
        self.remaining = max(0, self.remaining - 1)
        if self.remaining == 0:
            self.running = False
            return True
        return False

    @property
    def expired(self) -> bool:
        return self.remaining == 0

    def __repr__(self):
        state = 'running' if self.running else 'stopped'
        return f"<Countdown {self.remaining}/{self.duration}s {state}>"

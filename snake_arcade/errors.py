"""Exception types."""


class SnakeArcadeError(Exception):
    pass


class Collision(SnakeArcadeError):
    """The next head position is fatal unless a life is spent."""

    def __init__(self, cell):
        super().__init__(f"collision at {cell}")
        self.cell = cell


class WallCollision(Collision):
    pass


class SelfCollision(Collision):
    pass


class PersistenceError(SnakeArcadeError):
    pass


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass


class InvalidCommand(SnakeArcadeError):
    """A command that makes no sense in the current phase."""


class ModeLockedError(InvalidCommand):
    pass


class CustomizationError(InvalidCommand):
    pass

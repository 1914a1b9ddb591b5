"""Exceptions raised by the task board."""


class TaskBoardError(Exception):
    """Base class for task board failures."""
    pass


class ValidationError(TaskBoardError):
    """Raised when input is malformed or a status is outside the workflow."""
    pass


class NotFound(TaskBoardError):
    """Raised when no card has the requested id."""

    def __init__(self, card_id: str):
        super().__init__(f"No card with id {card_id}")
        self.card_id = card_id


class ConfigError(TaskBoardError):
    """Raised when configuration is invalid or incomplete."""
    pass

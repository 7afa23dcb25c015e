class SquashTrackerError(ValueError):
    """Base class for domain errors raised by the service layer."""


class NotFoundError(SquashTrackerError):
    pass


class PreconditionFailedError(SquashTrackerError):
    """The target is not in a state that allows the requested operation."""


class ScoreValidationError(SquashTrackerError):
    pass


class DuplicateError(SquashTrackerError):
    pass

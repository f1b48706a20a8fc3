"""
Domain exceptions raised by the service layer.

Every exception carries the HTTP status code the API layer answers with, so
services never import FastAPI. The handler registered in ``courtside.main``
turns them into ``{"detail": message}`` responses.
"""


class CourtsideError(Exception):
    """Base exception for tournament, match and stamina rules."""
    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(CourtsideError):
    """Actor lacks the required relationship to the resource."""
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotAssignedWitnessError(UnauthorizedError):
    default_message = "Not the assigned witness"


class NotFoundError(CourtsideError):
    status_code = 404
    default_message = "Resource not found"


class InvalidStateError(CourtsideError):
    """Operation attempted outside its valid source state."""
    status_code = 409
    default_message = "Operation not allowed in the current state"


class NotOpenError(InvalidStateError):
    default_message = "Tournament is not open"


class AlreadyRegisteredError(InvalidStateError):
    default_message = "Already registered"


class NotRegisteredError(InvalidStateError):
    default_message = "Not registered"


class TournamentFullError(InvalidStateError):
    default_message = "Tournament is full"


class TooFewPlayersError(InvalidStateError):
    default_message = "Not enough players to start"


class AlreadyRespondedError(InvalidStateError):
    default_message = "Request already responded to"


class AlreadyExistsError(InvalidStateError):
    default_message = "Resource already exists"


class InsufficientStaminaError(CourtsideError):
    status_code = 400
    default_message = "Insufficient stamina"


class InvalidResultError(CourtsideError):
    status_code = 400
    default_message = "Winner must be one of the players in the match"


class InvalidDecisionError(CourtsideError):
    status_code = 400
    default_message = "Decision must be ACCEPTED or REJECTED"


class InvalidConfigValueError(CourtsideError):
    status_code = 400
    default_message = "Invalid value for this configuration key"

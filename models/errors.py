"""Exceptions raised by the bracket engine and its collaborators."""


class BracketError(Exception):
    """Base exception for all bracket errors.

    Carries the offending team and round (when known) so callers can report
    exactly which matchup stopped the run.
    """

    def __init__(self, message: str, team: str | None = None, round_kind=None):
        self.team = team
        self.round_kind = round_kind
        context = []
        if team is not None:
            context.append(f"team={team}")
        if round_kind is not None:
            context.append(f"round={round_kind}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ValidationError(BracketError, ValueError):
    """Raised when roster or entity data is invalid."""
    pass


class PercentFormatError(ValidationError):
    """Raised when a win percentage reading can't be parsed."""
    pass


class PredictionNotFound(BracketError, LookupError):
    """Raised when no win probability is available for a team and round."""
    pass


class StateError(BracketError):
    """Raised when a bracket operation would break a bracket invariant."""
    pass


class FetchError(BracketError):
    """Raised when a roster or bracket page can't be downloaded."""
    pass


class ActionError(BracketError):
    """Raised when a pick could not be applied externally."""
    pass

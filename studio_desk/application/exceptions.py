class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class UpstreamUnavailable(RuntimeError):
    """Raised when the spreadsheet (availability or class data) cannot be read."""
    pass


class DeliveryFailure(RuntimeError):
    """Raised when a booking notification could not be delivered."""
    pass


class TimeParseError(ValueError):
    """Raised when a time token in an availability row cannot be parsed."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Cannot parse time {token!r}: {reason}")
        self.token = token
        self.reason = reason


class BookingValidationError(ValueError):
    """Raised when booking input is rejected. `field` names the offending input."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidTransitionError(RuntimeError):
    def __init__(self, status: str, action: str) -> None:
        super().__init__(f"Cannot {action} while booking is {status}")
        self.status = status
        self.action = action

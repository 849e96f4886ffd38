"""Exceptions raised while validating and submitting operation requests."""


class OperationError(Exception):
    """Base class for every user-facing failure of an operation request."""
    pass


class UsageError(OperationError):
    """A required field is missing or has an invalid value."""
    pass


class AmbiguityError(OperationError):
    """Several candidates exist and nothing tells them apart."""
    pass


class NotFoundError(OperationError):
    """A referenced remote resource does not exist."""
    pass


class RemoteError(OperationError):
    """Talking to the control plane failed."""
    pass


class SchemaViolationError(OperationError):
    """Updated parameters were rejected by the config constraint."""
    pass


class ConfirmationDeclined(OperationError):
    """The user did not confirm the operation."""
    pass


class SubmissionError(OperationError):
    """The operation request could not be rendered or created."""
    pass

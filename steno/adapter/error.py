"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class KeyManagementError(AdapterError):
    """The key-management service could not issue or unwrap a data key.

    Not a token problem: this propagates as an infrastructure failure.
    """

    pass

"""Error types for users module."""


class AuthenticationFailed(Exception):
    """Raised when an email/password pair does not match a user."""

    def __init__(self, message: str = "Invalid email or password"):
        self.message = message
        super().__init__(self.message)

"""
Custom exception classes for the application.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class LoginRequired(ApplicationError):
    """Raised when a route needs a signed-in user and the request has none"""

    def __init__(self, redirect_to: str):
        self.redirect_to = redirect_to
        super().__init__("Login required", {"redirect_to": redirect_to})

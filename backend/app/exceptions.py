"""
Chirper Backend: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the rejection paths of the service layer.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return responses with the status codes the HTTP contract requires.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    ChirperError (base)
    ├── ValidationError       → 400 Bad Request, empty body
    ├── AuthenticationError   → 401 Unauthorized, empty body
    └── DatabaseError         → 500 Internal Server Error

    Rejections carry their reason in `message`/`context` for the server log
    only; clients receive an empty body.
"""

from typing import Any, Dict, Optional


class ChirperError(Exception):
    """
    Base exception for all Chirper application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ChirperError):
    """
    Raised when a business rule rejects the request.

    When:    Blank username, short password, taken username, blank or
             over-long message text, unknown posted_by, unknown message id
             on update, or a repository write that produced no row.
    HTTP:    400 Bad Request with an empty body.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(ChirperError):
    """
    Raised when login credentials do not match an account.

    HTTP:    401 Unauthorized with an empty body. The log message says which
             check failed; the response never does.
    """

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ChirperError):
    """
    Raised when database operations fail outside the repository boundary.

    HTTP:    500 Internal Server Error. The message returned to the client is
             always generic; details are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

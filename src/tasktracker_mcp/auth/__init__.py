"""Sign-in, sign-up and sign-out."""

from tasktracker_mcp.auth.flow import AuthFlow, validate_sign_in, validate_sign_up

__all__ = [
    "AuthFlow",
    "validate_sign_in",
    "validate_sign_up",
]

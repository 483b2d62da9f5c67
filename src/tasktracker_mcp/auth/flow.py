"""
Auth Flow.

Sign-in, sign-up and sign-out on top of the transport. Input is validated
locally before any request; a successful sign-in writes the returned token
into the session store.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from tasktracker_mcp.constants import MIN_PASSWORD_LENGTH, Endpoint
from tasktracker_mcp.errors import ClientError, ErrorKind
from tasktracker_mcp.models import Session
from tasktracker_mcp.results import Result
from tasktracker_mcp.session.store import SessionStore
from tasktracker_mcp.transport.client import TransportClient
from tasktracker_mcp.transport.outcome import OutcomeKind, Request, RequestOutcome

logger = logging.getLogger(__name__)

_NO_TOKEN = "Sign-in response did not include a token."


def validate_sign_in(identifier: str, secret: str) -> ClientError | None:
    """Pre-flight check for sign-in input."""
    if not identifier or not secret:
        return ClientError.of(ErrorKind.MISSING_FIELDS, "Please enter both email and password.")
    return None


def validate_sign_up(identifier: str, secret: str, confirm_secret: str) -> ClientError | None:
    """
    Pre-flight check for sign-up input.

    Checks run in a fixed order: all fields present, passwords match,
    password long enough. The first failure wins.
    """
    if not identifier or not secret or not confirm_secret:
        return ClientError.of(ErrorKind.MISSING_FIELDS)
    if secret != confirm_secret:
        return ClientError.of(ErrorKind.PASSWORD_MISMATCH)
    if len(secret) < MIN_PASSWORD_LENGTH:
        return ClientError.of(
            ErrorKind.PASSWORD_TOO_SHORT,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
        )
    return None


class AuthFlow:
    """Authenticates against the backend and manages the session token."""

    def __init__(self, transport: TransportClient, session: SessionStore) -> None:
        self._transport = transport
        self._session = session

    async def sign_in(self, identifier: str, secret: str) -> Result[Session]:
        """
        Sign in and store the returned token.

        Args:
            identifier: Username (the user's email)
            secret: Password

        Returns:
            Result carrying the :class:`Session` on success.
        """
        error = validate_sign_in(identifier, secret)
        if error:
            return Result.failure(error)

        outcome = await self._transport.send(
            Request(
                "POST",
                Endpoint.SIGN_IN,
                body={"username": identifier, "password": secret},
                requires_auth=False,
            )
        )

        if outcome.kind == OutcomeKind.DATA and isinstance(outcome.payload, dict):
            try:
                session = Session.from_api(outcome.payload)
            except ValidationError:
                logger.warning("Sign-in response carried no access token")
                return Result.failure(_inconsistent(_payload_message(outcome.payload) or _NO_TOKEN))
            self._session.set(session.token)
            logger.info("Signed in as %s", session.username or identifier)
            return Result.success(session)

        if outcome.kind in (OutcomeKind.DATA, OutcomeKind.EMPTY):
            return Result.failure(_inconsistent(_NO_TOKEN))

        return Result.failure(_failure(outcome, "Login failed. Please check your credentials."))

    async def sign_up(self, identifier: str, secret: str, confirm_secret: str) -> Result[None]:
        """
        Register a new account.

        The identifier is sent as both username and email. Success does not
        sign the user in; the caller should route to sign-in next.
        """
        error = validate_sign_up(identifier, secret, confirm_secret)
        if error:
            return Result.failure(error)

        outcome = await self._transport.send(
            Request(
                "POST",
                Endpoint.SIGN_UP,
                body={"username": identifier, "email": identifier, "password": secret},
                requires_auth=False,
            )
        )

        if outcome.kind == OutcomeKind.DATA:
            logger.info("Registered %s", identifier)
            return Result.success()
        if outcome.kind == OutcomeKind.EMPTY:
            return Result.failure(_inconsistent("Sign-up response was empty."))
        return Result.failure(_failure(outcome, "Registration failed. Please try again."))

    def sign_out(self) -> None:
        """Forget the current session."""
        self._session.clear()
        logger.info("Signed out")

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated


def _inconsistent(message: str) -> ClientError:
    return ClientError.of(ErrorKind.NETWORK_ERROR, message)


def _failure(outcome: RequestOutcome, rejected_message: str) -> ClientError:
    # Auth requests never carry a token, so a 401 here is a credentials
    # rejection reported as HTTP_ERROR by the transport.
    error = outcome.to_error()
    if error.kind == ErrorKind.HTTP_ERROR and outcome.message is None:
        return ClientError.of(ErrorKind.HTTP_ERROR, rejected_message, status=error.status)
    return error


def _payload_message(payload: dict) -> str | None:
    message = payload.get("message")
    return message if isinstance(message, str) and message else None

"""
Authentication error taxonomy.

Every class carries a stable ``code`` and an HTTP ``status`` so the API error
handlers can render it without knowing the individual failure.
"""
from __future__ import annotations


class AuthError(Exception):
    code = "AUTH_ERROR"
    status = 401
    message = "Authentication failed"

    def __init__(self, message: str | None = None, code: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if code:
            self.code = code


class TokenRequired(AuthError):
    code = "TOKEN_REQUIRED"
    message = "Access token is required"


class RefreshTokenRequired(AuthError):
    code = "REFRESH_REQUIRED"
    message = "Refresh token required"


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    message = "Invalid or expired token"


class InvalidTokenType(AuthError):
    code = "INVALID_TOKEN_TYPE"
    message = "Invalid token type"


class InvalidRefreshToken(AuthError):
    code = "INVALID_REFRESH"
    message = "Invalid refresh token"


class RefreshTokenExpired(AuthError):
    code = "REFRESH_EXPIRED"
    message = "Refresh token expired"


class RefreshTokenReuseDetected(AuthError):
    code = "REFRESH_REUSE"
    message = "Refresh token reused"


class AccountDeactivated(AuthError):
    code = "ACCOUNT_DEACTIVATED"
    message = "Account is deactivated"


class CredentialsInvalid(AuthError):
    # same message for unknown email and wrong password
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class PrincipalNotFound(AuthError):
    code = "NOT_FOUND"
    status = 404
    message = "Account not found"


class CsrfMismatch(AuthError):
    code = "CSRF_MISMATCH"
    status = 403
    message = "Invalid CSRF token"


class StorageError(Exception):
    """Credential store failure that is not an authorization decision."""

"""Google OAuth2 handshake."""

from .google import GOOGLE_TOKEN_URL, SCOPES, GoogleOAuth

__all__ = ["GOOGLE_TOKEN_URL", "SCOPES", "GoogleOAuth"]

"""Authentication for clients of the Aggregation Service."""

from aggregation.infrastructure.auth.jwt_auth import IssuedToken, JwtTokenHandler

__all__ = ["IssuedToken", "JwtTokenHandler"]

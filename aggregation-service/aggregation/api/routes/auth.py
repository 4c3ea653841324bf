from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from aggregation.api.dependencies import get_auth_service
from aggregation.core.exceptions import AuthenticationError
from aggregation.core.logging import get_logger
from aggregation.infrastructure.auth.jwt_auth import JwtTokenHandler

# Initialize router and logger
auth_router = APIRouter()
logger = get_logger(__name__)


class LoginRequest(BaseModel):
    """Credentials posted to the token endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    user_name: Optional[str] = Field(None, alias="userName")
    password: Optional[str] = None


class TokenResponse(BaseModel):
    """Signed bearer token and its expiry."""
    token: str
    expiration: datetime


@auth_router.post(
    "/token",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue a bearer token",
    description="Exchanges the configured credentials for a signed JWT."
)
async def generate_token(
    request: LoginRequest,
    auth_service: JwtTokenHandler = Depends(get_auth_service),
) -> TokenResponse:
    """
    Token endpoint.

    Raises:
        AuthenticationError: If the credentials do not match
        ConfigurationError: If no signing secret is configured
    """
    if not auth_service.verify_credentials(request.user_name, request.password):
        logger.warning(f"Invalid credentials for user '{request.user_name}'")
        raise AuthenticationError(detail="Invalid username or password", code="invalid_credentials")

    issued = auth_service.issue_token(request.user_name)
    return TokenResponse(token=issued.token, expiration=issued.expires_at)

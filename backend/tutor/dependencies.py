"""
FastAPI Dependencies

Caller identity and API key checks shared by the routers.
"""

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import APIKeyHeader

from tutor.config import settings

# API Key header scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str | None = Depends(api_key_header)) -> str:
    """
    Verify the X-API-Key header.

    If TUTOR_API_KEY is not configured (empty string), the check is
    disabled (development mode).

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    if not settings.TUTOR_API_KEY:
        return "dev-mode"

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Provide X-API-Key header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != settings.TUTOR_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    _api_key: str = Depends(verify_api_key),
) -> str:
    """
    Resolve the authenticated learner.

    The auth gateway in front of this service forwards the learner id in
    the X-User-Id header.

    Raises:
        HTTPException: 401 if no identity was forwarded
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user_id

from fastapi import Header
from typing import Optional
import jwt

from skillvision.config import get_settings
from skillvision.errors import Unauthenticated
from skillvision.middleware.correlation import request_user_id_var
from skillvision.utils.logger import get_logger

logger = get_logger("auth")

MAX_USER_ID_LENGTH = 255


def _user_id_from_jwt(authorization: Optional[str], secret: str) -> str:
    if not authorization:
        raise Unauthenticated("Authorization header required")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise Unauthenticated("Invalid authorization header format. Expected: Bearer <token>")

    try:
        payload = jwt.decode(
            parts[1],
            secret,
            algorithms=["HS256"],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning(f"[Auth] Rejected token: {exc}")
        raise Unauthenticated("Invalid token") from exc

    return str(payload["sub"])


async def get_user_id(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> str:
    """
    Resolve the caller's identity once per request.

    With JWT_SECRET configured, a Bearer token (HS256, `sub` claim) is
    required. Otherwise the X-User-ID header set by the frontend is used.

    Usage:
        @router.get("/endpoint")
        async def endpoint(user_id: str = Depends(get_user_id)):
            # Filter data by user_id
    """
    settings = get_settings()

    if settings.jwt_secret:
        user_id = _user_id_from_jwt(authorization, settings.jwt_secret)
    else:
        user_id = (x_user_id or "").strip()
        if not user_id:
            raise Unauthenticated("User ID required. Provide X-User-ID header.")

    if len(user_id) > MAX_USER_ID_LENGTH:
        raise Unauthenticated("Invalid user ID")

    request_user_id_var.set(user_id)
    return user_id

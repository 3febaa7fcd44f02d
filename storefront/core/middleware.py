from typing import Optional

from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin.auth import RevokedIdTokenError
from storefront.core.firebase import verify_merchant_token
import logging

logger = logging.getLogger(__name__)

# auto_error off so a missing header answers 401 like a bad token does
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """
    Authenticated merchant for dashboard routes (shipping setup, products,
    subscription). Storefront shoppers never hit these routes.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        decoded = verify_merchant_token(credentials.credentials)
    except RevokedIdTokenError:
        logger.warning("get_current_user: Revoked token")
        raise _unauthorized("Session revoked, please sign in again")
    except Exception as e:
        logger.error(f"get_current_user: Failure - {e}")
        raise _unauthorized("Could not validate credentials")

    merchant_id = decoded.get('uid')
    if not merchant_id:
        raise _unauthorized("Invalid authentication credentials")

    return {
        'uid': merchant_id,
        'email': decoded.get('email'),
        'token': decoded
    }

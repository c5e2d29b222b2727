import logging

import jwt
import requests
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from matchfinder.core.config import Settings, get_settings
from matchfinder.core.security import decode_access_token
from matchfinder.schemas.auth import CurrentUser
from matchfinder.services.stadium_resolver import StadiumResolver

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token missing")

    try:
        payload = decode_access_token(settings, credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Token verification failed: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid access token")

    if not payload.get("username"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid access token")

    return CurrentUser(username=payload["username"], isAdmin=bool(payload.get("isAdmin")))


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.isAdmin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admins only")
    return user


def get_stadium_resolver(settings: Settings = Depends(get_settings)):
    """One HTTP session per request, closed once the response is sent."""
    session = requests.Session()
    try:
        yield StadiumResolver(settings, session=session)
    finally:
        session.close()

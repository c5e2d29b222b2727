import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchfinder.core.config import Settings, get_settings
from matchfinder.core.database import get_db
from matchfinder.core.security import create_access_token, hash_password, verify_password
from matchfinder.repositories.user_repository import UserRepository
from matchfinder.schemas.auth import LoginIn, SignupIn, TokenOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    """
    Registers a regular user. The password is stored as a bcrypt hash.
    """
    if not all([payload.username, payload.password, payload.email, payload.country]):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing fields")

    users = UserRepository(db)
    if users.get_by_username(payload.username) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    # Signup never grants admin
    users.create(
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
        country=payload.country,
    )
    logger.info(f"New user signed up: {payload.username}")
    return {"message": "User created successfully"}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    Checks the credentials and returns a bearer token plus the admin flag.
    """
    user = UserRepository(db).get_by_username(payload.username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username doesn't exist")

    if not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong password")

    token = create_access_token(settings, user.username, user.is_admin)
    return TokenOut(token=token, isAdmin=user.is_admin)

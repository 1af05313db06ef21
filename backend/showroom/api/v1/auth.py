from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from ...core.database import get_db
from ...core.security import create_access_token, verify_password
from ...models.user_model import User
from ...schemas.auth_schema import LoginRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Admin login; returns a bearer token valid for ACCESS_TOKEN_EXPIRE_HOURS"""
    if not request.username or not request.password:
        raise HTTPException(status_code=400, detail="Missing fields")

    try:
        user = db.query(User).filter(User.username == request.username).first()
    except Exception as e:
        logging.error(f"Login error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    if not user or not verify_password(request.password, user.password):
        logging.warning(f"Failed login attempt for {request.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({
        "sub": user.username,
        "id": user.id,
        "username": user.username,
        "role": user.role,
    })
    logging.info(f"User {user.username} logged in")
    return {"token": token}

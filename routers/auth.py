from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from database import get_db
from models.users import User
from routers.deps import bearer_scheme, get_current_user
from schemas.auth import LoginSchema, LoginResponse, UserOut
from schemas.common import MessageResponse
from services.auth import authenticate, issue_token, revoke_token
import config
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


# 1. Login - token issue karta hai
@router.post("/login", response_model=LoginResponse)
def login(data: LoginSchema, db: Session = Depends(get_db)):
    user = authenticate(db, data.email, data.password)
    if not user:
        logger.warning("Failed login for %s", data.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = issue_token(db, user)
    return {
        "user": user,
        "token": token.token,
        "token_type": "Bearer",
        "expires_in": config.TOKEN_TTL_MINUTES * 60,
    }


# 2. Logout - sirf current token delete hota hai
@router.post("/logout", response_model=MessageResponse)
def logout(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    revoke_token(db, credentials.credentials)
    logger.info("User %s logged out", user.email)
    return {"message": "Logged out"}


# 3. Current user
@router.get("/user", response_model=UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user

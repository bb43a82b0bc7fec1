from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from database import get_db
from models.users import User
from services.auth import resolve_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthenticated.", headers={"WWW-Authenticate": "Bearer"})

    user = resolve_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthenticated.", headers={"WWW-Authenticate": "Bearer"})

    # Request log middleware picks this up (plain str, outlives the session)
    request.state.user_email = user.email
    return user


def require_roles(*roles):
    """Router/route dependency: only the listed roles get through."""
    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="This action is unauthorized.")
        return user
    return checker


def get_or_404(db: Session, model, record_id: int, label: str):
    record = db.get(model, record_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record

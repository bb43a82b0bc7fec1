from sqlalchemy.orm import Session
from models.users import User, AccessToken
import config
import datetime
import logging
import secrets

logger = logging.getLogger(__name__)


def authenticate(db: Session, email: str, password: str):
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not user.check_password(password):
        return None
    return user


def issue_token(db: Session, user: User) -> AccessToken:
    token = AccessToken(
        token=secrets.token_hex(32),
        user_id=user.id,
        expires_at=datetime.datetime.now() + datetime.timedelta(minutes=config.TOKEN_TTL_MINUTES),
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    logger.info("User %s (%s) logged in", user.email, user.role)
    return token


def resolve_token(db: Session, raw_token: str):
    """User behind a bearer token, or None when unknown or expired."""
    token = db.query(AccessToken).filter(AccessToken.token == raw_token).first()
    if token is None:
        return None
    if token.expires_at <= datetime.datetime.now():
        db.delete(token)
        db.commit()
        return None
    return token.user


def revoke_token(db: Session, raw_token: str):
    db.query(AccessToken).filter(AccessToken.token == raw_token).delete()
    db.commit()

from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, Header
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import PageNotFound, Unauthorized
from app.models.user import User

ALGORITHM = "HS256"

def _create_token(user_id: int, email: str, token_type: str, expire_min: int) -> str:
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expire_min),
        "type": token_type
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)

def create_access_token(user_id: int, email: str) -> str:
    #token d'accès, 15 minutes par défaut
    return _create_token(user_id, email, "access", settings.JWT_EXPIRE_MIN)

def create_refresh_token(user_id: int, email: str) -> str:
    #token de rafraîchissement, 30 jours par défaut
    return _create_token(user_id, email, "refresh", settings.JWT_REFRESH_EXPIRE_MIN)

def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None

def decode_token(token: str) -> Optional[int]:
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    return payload.get("user_id")

def get_current_user(db: Session = Depends(get_db), authorization: Optional[str] = Header(None)) -> User:
    """Récupère l'utilisateur depuis le JWT token (appelé avant chaque route protégée)"""
    if not authorization:
        raise Unauthorized("Missing token")

    token = authorization.replace("Bearer ", "")
    user_id = decode_token(token)
    if not user_id:
        raise Unauthorized("Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise PageNotFound("User not found")

    return user

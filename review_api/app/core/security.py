from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AuthorizationHeaderError, InvalidTokenError, NotAuthenticatedError
from app.db.session import get_db
from app.db.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_PREFIX = "Bearer "

def _normalize_password(password: str) -> str:
	# bcrypt only considers the first 72 bytes; truncate consistently to avoid errors.
	raw = password.encode("utf-8")
	if len(raw) <= 72:
		return password
	return raw[:72].decode("utf-8", errors="ignore")

def hash_password(password: str) -> str:
	return pwd_context.hash(_normalize_password(password))

def verify_password(password: str, password_hash: str) -> bool:
	return pwd_context.verify(_normalize_password(password), password_hash)

def dummy_verify() -> None:
	# Same cost as a real verify, used when the username is unknown.
	pwd_context.dummy_verify()

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
	now = datetime.now(timezone.utc)
	if expires_delta is None:
		expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRES_MIN)
	payload = {
		"sub": str(user.id),
		"username": user.username,
		"type": "access",
		"iat": int(now.timestamp()),
		"exp": int((now + expires_delta).timestamp()),
	}
	return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def decode_token(token: str) -> dict:
	return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])

def _user_id_from_token(token: str) -> int:
	try:
		payload = decode_token(token)
	except JWTError:
		raise InvalidTokenError("Invalid or expired token")
	if payload.get("type") != "access":
		raise InvalidTokenError("Invalid token type")
	subject = payload.get("sub")
	try:
		return int(subject)
	except (TypeError, ValueError):
		raise InvalidTokenError("Invalid token structure")

def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
	"""Resolve the bearer token, if any, to a user.

	No header means an anonymous request and yields None. A header that is
	present but unusable always rejects the request, including a valid token
	whose user has since been removed.
	"""
	request.state.user = None
	auth = request.headers.get("Authorization")
	if not auth:
		return None
	if not auth.startswith(BEARER_PREFIX):
		raise AuthorizationHeaderError(f"Authorization token must start with {BEARER_PREFIX}")

	user_id = _user_id_from_token(auth[len(BEARER_PREFIX):].strip())
	user = db.get(User, user_id)
	if not user:
		raise InvalidTokenError("User associated with token not found")
	request.state.user = user
	return user

def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
	if user is None:
		raise NotAuthenticatedError()
	return user

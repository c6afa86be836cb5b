from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models import User
from app.schemas.auth import RegisterRequest, LoginRequest, AuthResponse, UserOut
from app.core.config import settings
from app.core.errors import (
	MissingCredentialsError, PasswordTooShortError,
	UserExistsError, InvalidCredentialsError,
)
from app.core.security import create_access_token, get_optional_user, get_current_user
from app.core.logging import log_event
from app.services import users as user_store

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(get_optional_user)])

@router.post("/register", response_model=AuthResponse)
def register(request: Request, payload: Optional[RegisterRequest] = None, db: Session = Depends(get_db)):
	payload = payload or RegisterRequest()
	username, password = payload.username, payload.password
	if not username or not password:
		raise MissingCredentialsError()
	if len(password) < settings.MIN_PASSWORD_LENGTH:
		raise PasswordTooShortError(
			f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long."
		)

	if user_store.get_user_by_username(db, username):
		raise UserExistsError(f"User {username} is already taken.")

	user = user_store.create_user(db, username, password)

	log_event("user_registered", user_id=user.id, username=user.username, request_id=request.state.request_id)
	return {
		"message": "Registration successful!",
		"token": create_access_token(user),
		"user": user,
	}

@router.post("/login", response_model=AuthResponse)
def login(request: Request, payload: Optional[LoginRequest] = None, db: Session = Depends(get_db)):
	payload = payload or LoginRequest()
	if not payload.username or not payload.password:
		raise MissingCredentialsError()

	user = user_store.verify_credentials(db, payload.username, payload.password)
	if not user:
		raise InvalidCredentialsError()

	log_event("user_login", user_id=user.id, username=user.username, request_id=request.state.request_id)
	return {
		"message": "Login successful!",
		"token": create_access_token(user),
		"user": user,
	}

@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
	return user

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

class RegisterRequest(BaseModel):
	# Presence and length are checked by the handler so the caller gets a named error
	username: Optional[str] = None
	password: Optional[str] = None

class LoginRequest(BaseModel):
	username: Optional[str] = None
	password: Optional[str] = None

class UserOut(BaseModel):
	id: int
	username: str
	created_at: datetime

	class Config:
		from_attributes = True

class AuthResponse(BaseModel):
	message: str
	token: str
	user: UserOut

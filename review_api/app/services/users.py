from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import UserExistsError
from app.core.security import hash_password, verify_password, dummy_verify
from app.db.models import User


def create_user(db: Session, username: str, password: str) -> User:
	user = User(username=username, password_hash=hash_password(password))
	db.add(user)
	try:
		db.commit()
	except IntegrityError:
		# Lost a race against a concurrent registration for the same name
		db.rollback()
		raise UserExistsError(f"User {username} is already taken.")
	db.refresh(user)
	return user


def get_user_by_username(db: Session, username: str) -> User | None:
	return db.query(User).filter(User.username == username).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
	return db.get(User, user_id)


def verify_credentials(db: Session, username: str, password: str) -> User | None:
	user = get_user_by_username(db, username)
	if not user:
		dummy_verify()
		return None
	if not verify_password(password, user.password_hash):
		return None
	return user

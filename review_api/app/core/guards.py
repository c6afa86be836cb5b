"""Existence and ownership checks for the mutating endpoints.

Each protected route chains: current user -> resource exists -> user owns
it. Dependencies declared first are resolved first, so an anonymous caller
is rejected before the resource is even looked up.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.errors import ResourceNotFoundError, UnauthorizedError
from app.core.security import get_current_user
from app.db.models import User
from app.db.session import get_db
from app.services import comments as comment_store
from app.services import reviews as review_store


def ensure_exists(resource: dict | None, kind: str, resource_id: int) -> dict:
	if resource is None:
		raise ResourceNotFoundError(kind, resource_id)
	return resource


def ensure_owner(resource: dict, user: User, kind: str) -> dict:
	if resource["user_id"] != user.id:
		raise UnauthorizedError(f"You do not have permission to modify this {kind.lower()}")
	return resource


def require_review(review_id: int, db: Session = Depends(get_db)) -> dict:
	return ensure_exists(review_store.get_review_by_id(db, review_id), "Review", review_id)


def require_own_review(
	user: User = Depends(get_current_user),
	review: dict = Depends(require_review),
) -> dict:
	return ensure_owner(review, user, "Review")


def require_comment(comment_id: int, db: Session = Depends(get_db)) -> dict:
	return ensure_exists(comment_store.get_comment_by_id(db, comment_id), "Comment", comment_id)


def require_own_comment(
	user: User = Depends(get_current_user),
	comment: dict = Depends(require_comment),
) -> dict:
	return ensure_owner(comment, user, "Comment")

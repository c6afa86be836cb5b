from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models import User
from app.schemas.reviews import ReviewUpdate, ReviewEnvelope, ReviewDeleted, ReviewList
from app.schemas.comments import CommentBody, CommentEnvelope, CommentList
from app.core.errors import MissingFieldsError, NoFieldsProvidedError
from app.core.guards import require_review, require_own_review
from app.core.security import get_current_user, get_optional_user
from app.core.logging import log_event
from app.services import comments as comment_store
from app.services import reviews as review_store

router = APIRouter(prefix="/reviews", tags=["reviews"], dependencies=[Depends(get_optional_user)])

@router.get("/me", response_model=ReviewList)
def list_my_reviews(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	return {"reviews": review_store.get_reviews_by_user(db, user.id)}

@router.put("/{review_id}", response_model=ReviewEnvelope)
def update_review(
	request: Request,
	payload: Optional[ReviewUpdate] = None,
	review: dict = Depends(require_own_review),
	db: Session = Depends(get_db),
):
	payload = payload or ReviewUpdate()
	if payload.rating is None and payload.review_text is None:
		raise NoFieldsProvidedError()

	updated = review_store.update_review(
		db, review["id"], rating=payload.rating, review_text=payload.review_text
	)

	log_event("review_updated", review_id=review["id"], user_id=review["user_id"], request_id=request.state.request_id)
	return {"review": updated}

@router.delete("/{review_id}", response_model=ReviewDeleted)
def delete_review(
	request: Request,
	review: dict = Depends(require_own_review),
	db: Session = Depends(get_db),
):
	deleted = review_store.delete_review(db, review["id"])

	log_event("review_deleted", review_id=review["id"], user_id=review["user_id"], request_id=request.state.request_id)
	return {"message": "Review deleted successfully", "review": deleted}

# Comments nested under a review

@router.get("/{review_id}/comments", response_model=CommentList)
def list_review_comments(review: dict = Depends(require_review), db: Session = Depends(get_db)):
	return {"comments": comment_store.get_comments_by_review(db, review["id"])}

@router.post("/{review_id}/comments", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
def create_review_comment(
	request: Request,
	payload: Optional[CommentBody] = None,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	review: dict = Depends(require_review),
):
	payload = payload or CommentBody()
	if comment_store.is_blank(payload.comment_text):
		raise MissingFieldsError(comment_store.EMPTY_COMMENT_MESSAGE)

	comment = comment_store.create_comment(db, review["id"], user.id, payload.comment_text)

	log_event("comment_created", comment_id=comment["id"], review_id=review["id"], user_id=user.id, request_id=request.state.request_id)
	return {"comment": comment}

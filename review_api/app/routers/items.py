from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models import User
from app.schemas.items import ItemEnvelope, ItemList
from app.schemas.reviews import ReviewCreate, ReviewEnvelope, ReviewList
from app.core.errors import MissingFieldsError, ResourceNotFoundError
from app.core.security import get_current_user, get_optional_user
from app.core.logging import log_event
from app.services import items as item_store
from app.services import reviews as review_store

router = APIRouter(prefix="/items", tags=["items"], dependencies=[Depends(get_optional_user)])

def _require_item(db: Session, item_id: int) -> dict:
	item = item_store.get_item_by_id(db, item_id)
	if not item:
		raise ResourceNotFoundError("Item", item_id)
	return item

@router.get("", response_model=ItemList)
def list_items(db: Session = Depends(get_db)):
	return {"items": item_store.list_items(db)}

@router.get("/{item_id}", response_model=ItemEnvelope)
def get_item(item_id: int, db: Session = Depends(get_db)):
	return {"item": _require_item(db, item_id)}

@router.get("/{item_id}/reviews", response_model=ReviewList)
def list_item_reviews(item_id: int, db: Session = Depends(get_db)):
	_require_item(db, item_id)
	return {"reviews": review_store.get_reviews_by_item(db, item_id)}

@router.post("/{item_id}/reviews", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
def create_item_review(
	request: Request,
	item_id: int,
	payload: Optional[ReviewCreate] = None,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	payload = payload or ReviewCreate()
	if payload.rating is None or not payload.review_text:
		raise MissingFieldsError("Please provide both rating and reviewText.")

	_require_item(db, item_id)
	review = review_store.create_review(db, item_id, user.id, payload.rating, payload.review_text)

	log_event("review_created", review_id=review["id"], item_id=item_id, user_id=user.id, request_id=request.state.request_id)
	return {"review": review}

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateReviewError, InvalidRatingError, NoFieldsProvidedError
from app.db.models import Item, Review, User

UNIQUE_REVIEW_CONSTRAINT = "uq_review_item_user"


def _review_row(review: Review, author_username: str | None = None, item_name: str | None = None) -> dict:
	row = {
		"id": review.id,
		"item_id": review.item_id,
		"user_id": review.user_id,
		"rating": review.rating,
		"review_text": review.review_text,
		"created_at": review.created_at,
		"updated_at": review.updated_at,
	}
	if author_username is not None:
		row["author_username"] = author_username
	if item_name is not None:
		row["item_name"] = item_name
	return row


def _full_review_row(review: Review) -> dict:
	return _review_row(review, author_username=review.author.username, item_name=review.item.name)


def validate_rating(rating) -> int:
	# bool is an int subclass, but True is not a rating
	if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
		raise InvalidRatingError()
	return rating


def _is_duplicate_review(exc: IntegrityError) -> bool:
	orig = exc.orig
	# psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
	code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
	if code == "23505":
		return True
	message = str(orig)
	return UNIQUE_REVIEW_CONSTRAINT in message or "UNIQUE constraint failed: reviews." in message


def create_review(db: Session, item_id: int, user_id: int, rating: int, review_text: str | None) -> dict:
	review = Review(
		item_id=item_id,
		user_id=user_id,
		rating=validate_rating(rating),
		review_text=review_text,
	)
	db.add(review)
	try:
		db.commit()
	except IntegrityError as exc:
		db.rollback()
		if _is_duplicate_review(exc):
			raise DuplicateReviewError()
		raise
	db.refresh(review)
	return _full_review_row(review)


def get_review_by_id(db: Session, review_id: int) -> dict | None:
	row = (
		db.query(Review, User.username)
		.join(User, Review.user_id == User.id)
		.filter(Review.id == review_id)
		.first()
	)
	if not row:
		return None
	review, username = row
	return _review_row(review, author_username=username)


def update_review(db: Session, review_id: int, rating: int | None = None, review_text: str | None = None) -> dict | None:
	if rating is None and review_text is None:
		raise NoFieldsProvidedError()
	if rating is not None:
		validate_rating(rating)

	review = db.get(Review, review_id)
	if not review:
		return None
	if rating is not None:
		review.rating = rating
	if review_text is not None:
		review.review_text = review_text
	review.updated_at = datetime.utcnow()
	db.commit()
	db.refresh(review)
	return _full_review_row(review)


def delete_review(db: Session, review_id: int) -> dict | None:
	review = db.get(Review, review_id)
	if not review:
		return None
	deleted = _full_review_row(review)
	db.delete(review)
	db.commit()
	return deleted


def get_reviews_by_item(db: Session, item_id: int) -> list[dict]:
	rows = (
		db.query(Review, User.username)
		.join(User, Review.user_id == User.id)
		.filter(Review.item_id == item_id)
		.order_by(Review.created_at.desc(), Review.id.desc())
		.all()
	)
	return [_review_row(review, author_username=username) for review, username in rows]


def get_reviews_by_user(db: Session, user_id: int) -> list[dict]:
	rows = (
		db.query(Review, User.username, Item.name)
		.join(User, Review.user_id == User.id)
		.join(Item, Review.item_id == Item.id)
		.filter(Review.user_id == user_id)
		.order_by(Review.created_at.desc(), Review.id.desc())
		.all()
	)
	return [
		_review_row(review, author_username=username, item_name=item_name)
		for review, username, item_name in rows
	]

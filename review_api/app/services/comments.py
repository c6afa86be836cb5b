from datetime import datetime

from sqlalchemy.orm import Session

from app.core.errors import MissingFieldsError
from app.db.models import Comment, Item, Review, User

EMPTY_COMMENT_MESSAGE = "Comment text cannot be empty"


def _comment_row(comment: Comment, **extra) -> dict:
	row = {
		"id": comment.id,
		"review_id": comment.review_id,
		"user_id": comment.user_id,
		"comment_text": comment.comment_text,
		"created_at": comment.created_at,
		"updated_at": comment.updated_at,
	}
	row.update(extra)
	return row


def _full_comment_row(comment: Comment) -> dict:
	review = comment.review
	return _comment_row(
		comment,
		author_username=comment.author.username,
		item_id=review.item_id,
		item_name=review.item.name,
	)


def is_blank(text: str | None) -> bool:
	return text is None or not text.strip()


def create_comment(db: Session, review_id: int, user_id: int, comment_text: str) -> dict:
	if is_blank(comment_text):
		raise MissingFieldsError(EMPTY_COMMENT_MESSAGE)
	comment = Comment(review_id=review_id, user_id=user_id, comment_text=comment_text)
	db.add(comment)
	db.commit()
	db.refresh(comment)
	return _full_comment_row(comment)


def get_comment_by_id(db: Session, comment_id: int) -> dict | None:
	row = (
		db.query(Comment, User.username)
		.join(User, Comment.user_id == User.id)
		.filter(Comment.id == comment_id)
		.first()
	)
	if not row:
		return None
	comment, username = row
	return _comment_row(comment, author_username=username)


def update_comment(db: Session, comment_id: int, comment_text: str | None) -> dict | None:
	# Blank text leaves the comment as it is
	if is_blank(comment_text):
		return get_comment_by_id(db, comment_id)

	comment = db.get(Comment, comment_id)
	if not comment:
		return None
	comment.comment_text = comment_text
	comment.updated_at = datetime.utcnow()
	db.commit()
	db.refresh(comment)
	return _full_comment_row(comment)


def delete_comment(db: Session, comment_id: int) -> dict | None:
	comment = db.get(Comment, comment_id)
	if not comment:
		return None
	deleted = _full_comment_row(comment)
	db.delete(comment)
	db.commit()
	return deleted


def get_comments_by_review(db: Session, review_id: int) -> list[dict]:
	rows = (
		db.query(Comment, User.username)
		.join(User, Comment.user_id == User.id)
		.filter(Comment.review_id == review_id)
		.order_by(Comment.created_at.asc(), Comment.id.asc())
		.all()
	)
	return [_comment_row(comment, author_username=username) for comment, username in rows]


def get_comments_by_user(db: Session, user_id: int) -> list[dict]:
	rows = (
		db.query(Comment, Review.item_id, Item.name)
		.join(Review, Comment.review_id == Review.id)
		.join(Item, Review.item_id == Item.id)
		.filter(Comment.user_id == user_id)
		.order_by(Comment.created_at.desc(), Comment.id.desc())
		.all()
	)
	return [
		_comment_row(comment, item_id=item_id, item_name=item_name)
		for comment, item_id, item_name in rows
	]

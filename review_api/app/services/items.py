from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models import Item, Review


def _aggregate_query(db: Session):
	return (
		db.query(
			Item,
			func.coalesce(func.avg(Review.rating), 0).label("average_rating"),
			func.count(Review.id).label("review_count"),
		)
		.outerjoin(Review, Review.item_id == Item.id)
		.group_by(Item.id)
	)


def _item_row(item: Item, average_rating, review_count) -> dict:
	return {
		"id": item.id,
		"name": item.name,
		"description": item.description,
		"category": item.category,
		"created_at": item.created_at,
		"average_rating": float(average_rating or 0),
		"review_count": int(review_count or 0),
	}


def list_items(db: Session) -> list[dict]:
	rows = _aggregate_query(db).order_by(Item.created_at.desc(), Item.id.desc()).all()
	return [_item_row(item, avg, count) for item, avg, count in rows]


def get_item_by_id(db: Session, item_id: int) -> dict | None:
	row = _aggregate_query(db).filter(Item.id == item_id).first()
	if not row:
		return None
	item, avg, count = row
	return _item_row(item, avg, count)


def create_item(db: Session, name: str, description: str | None = None, category: str | None = None) -> Item:
	item = Item(name=name, description=description, category=category)
	db.add(item)
	db.commit()
	db.refresh(item)
	return item


def delete_item(db: Session, item_id: int) -> bool:
	"""Remove an item; its reviews and their comments go with it."""
	item = db.get(Item, item_id)
	if not item:
		return False
	db.delete(item)
	db.commit()
	return True

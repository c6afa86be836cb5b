import argparse
from typing import Iterable

from sqlalchemy.orm import Session

from app.core.logging import log_event
from app.db.base import Base
from app.db.models import Item, Review
from app.services import comments as comment_store
from app.services import items as item_store
from app.services import reviews as review_store
from app.services import users as user_store

CATALOG = [
	{"name": "The Great Novel", "description": "A truly captivating story.", "category": "Book"},
	{"name": "Tasty Bites Cafe", "description": "Cozy place with great coffee.", "category": "Restaurant"},
	{"name": "Super Gadget X", "description": "The latest and greatest gadget.", "category": "Product"},
]

DEMO_USERS = [
	("alice", "password123"),
	("bob", "password456"),
	("charlie", "password789"),
]

# (item name, username, rating, text)
DEMO_REVIEWS = [
	("The Great Novel", "alice", 5, "Absolutely loved this book!"),
	("Tasty Bites Cafe", "bob", 4, "Good food, nice atmosphere."),
	("The Great Novel", "bob", 4, "A solid read, recommended."),
	("Super Gadget X", "charlie", 3, "It works, but has some flaws."),
	("Tasty Bites Cafe", "alice", 5, "Best coffee in town!"),
]

# (review author, item name, commenter, text)
DEMO_COMMENTS = [
	("alice", "The Great Novel", "bob", "I agree, it was fantastic!"),
	("bob", "Tasty Bites Cafe", "alice", "Did you try their pastries?"),
	("alice", "The Great Novel", "charlie", "Putting it on my reading list."),
]


def seed_catalog(db: Session, entries: Iterable[dict] = CATALOG) -> int:
	if db.query(Item).count() > 0:
		return 0
	count = 0
	for entry in entries:
		item_store.create_item(db, entry["name"], entry.get("description"), entry.get("category"))
		count += 1
	if count:
		log_event("catalog_seeded", count=count)
	return count


def seed_demo_data(db: Session) -> dict:
	"""Seed the catalog plus demo users, reviews and comments.

	Rows that already exist are left alone, so this can run repeatedly.
	"""
	seed_catalog(db)
	items = {item.name: item for item in db.query(Item).all()}

	users = {}
	for username, password in DEMO_USERS:
		user = user_store.get_user_by_username(db, username)
		if not user:
			user = user_store.create_user(db, username, password)
		users[username] = user

	reviews = {}
	for item_name, username, rating, text in DEMO_REVIEWS:
		item, user = items.get(item_name), users[username]
		if not item:
			continue
		existing = db.query(Review).filter(Review.item_id == item.id, Review.user_id == user.id).first()
		if existing:
			reviews[(username, item_name)] = existing.id
			continue
		review = review_store.create_review(db, item.id, user.id, rating, text)
		reviews[(username, item_name)] = review["id"]

	comment_count = 0
	for author, item_name, commenter, text in DEMO_COMMENTS:
		review_id = reviews.get((author, item_name))
		if review_id is None:
			continue
		already = [
			row for row in comment_store.get_comments_by_review(db, review_id)
			if row["user_id"] == users[commenter].id and row["comment_text"] == text
		]
		if already:
			continue
		comment_store.create_comment(db, review_id, users[commenter].id, text)
		comment_count += 1

	summary = {"users": len(users), "reviews": len(reviews), "comments": comment_count}
	log_event("demo_data_seeded", **summary)
	return summary


def main(argv=None) -> None:
	from app.db.session import SessionLocal, engine

	parser = argparse.ArgumentParser(description="Seed the review site database.")
	parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
	args = parser.parse_args(argv)

	if args.reset:
		Base.metadata.drop_all(bind=engine)
	Base.metadata.create_all(bind=engine)

	db = SessionLocal()
	try:
		seed_demo_data(db)
	finally:
		db.close()


if __name__ == "__main__":
	main()

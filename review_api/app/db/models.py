from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base import Base

class User(Base):
	__tablename__ = "users"

	id = Column(Integer, primary_key=True, index=True)
	username = Column(String(255), unique=True, index=True, nullable=False)
	password_hash = Column(String(255), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	reviews = relationship("Review", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)
	comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)

class Item(Base):
	__tablename__ = "items"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String(255), nullable=False)
	description = Column(Text, nullable=True)
	category = Column(String(100), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	reviews = relationship("Review", back_populates="item", cascade="all, delete-orphan", passive_deletes=True)

class Review(Base):
	__tablename__ = "reviews"
	__table_args__ = (
		UniqueConstraint("item_id", "user_id", name="uq_review_item_user"),
		CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
	)

	id = Column(Integer, primary_key=True, index=True)
	item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), index=True, nullable=False)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
	rating = Column(Integer, nullable=False)
	review_text = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	item = relationship("Item", back_populates="reviews")
	author = relationship("User", back_populates="reviews")
	comments = relationship("Comment", back_populates="review", cascade="all, delete-orphan", passive_deletes=True)

class Comment(Base):
	__tablename__ = "comments"

	id = Column(Integer, primary_key=True, index=True)
	review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), index=True, nullable=False)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
	comment_text = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	review = relationship("Review", back_populates="comments")
	author = relationship("User", back_populates="comments")

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

class ReviewCreate(BaseModel):
	# Left untyped so validate_rating sees the raw JSON value
	rating: Optional[Any] = None
	review_text: Optional[str] = Field(default=None, alias="reviewText")

	class Config:
		populate_by_name = True

class ReviewUpdate(BaseModel):
	rating: Optional[Any] = None
	review_text: Optional[str] = Field(default=None, alias="reviewText")

	class Config:
		populate_by_name = True

class ReviewOut(BaseModel):
	id: int
	item_id: int
	user_id: int
	rating: int
	review_text: Optional[str] = None
	created_at: datetime
	updated_at: datetime
	author_username: Optional[str] = None
	item_name: Optional[str] = None

class ReviewEnvelope(BaseModel):
	review: ReviewOut

class ReviewDeleted(BaseModel):
	message: str
	review: ReviewOut

class ReviewList(BaseModel):
	reviews: list[ReviewOut]

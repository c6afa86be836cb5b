from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

class CommentBody(BaseModel):
	comment_text: Optional[str] = Field(default=None, alias="commentText")

	class Config:
		populate_by_name = True

class CommentOut(BaseModel):
	id: int
	review_id: int
	user_id: int
	comment_text: str
	created_at: datetime
	updated_at: datetime
	author_username: Optional[str] = None
	item_id: Optional[int] = None
	item_name: Optional[str] = None

class CommentEnvelope(BaseModel):
	comment: CommentOut

class CommentDeleted(BaseModel):
	message: str
	comment: CommentOut

class CommentList(BaseModel):
	comments: list[CommentOut]

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

class ItemOut(BaseModel):
	id: int
	name: str
	description: Optional[str] = None
	category: Optional[str] = None
	created_at: datetime
	average_rating: float = 0
	review_count: int = 0

class ItemEnvelope(BaseModel):
	item: ItemOut

class ItemList(BaseModel):
	items: list[ItemOut]

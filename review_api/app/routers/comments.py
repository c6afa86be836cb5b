from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models import User
from app.schemas.comments import CommentBody, CommentEnvelope, CommentDeleted, CommentList
from app.core.errors import MissingFieldsError
from app.core.guards import require_own_comment
from app.core.security import get_current_user, get_optional_user
from app.core.logging import log_event
from app.services import comments as comment_store

router = APIRouter(prefix="/comments", tags=["comments"], dependencies=[Depends(get_optional_user)])

@router.get("/me", response_model=CommentList)
def list_my_comments(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	return {"comments": comment_store.get_comments_by_user(db, user.id)}

@router.put("/{comment_id}", response_model=CommentEnvelope)
def update_comment(
	request: Request,
	payload: Optional[CommentBody] = None,
	comment: dict = Depends(require_own_comment),
	db: Session = Depends(get_db),
):
	payload = payload or CommentBody()
	if comment_store.is_blank(payload.comment_text):
		raise MissingFieldsError(comment_store.EMPTY_COMMENT_MESSAGE)

	updated = comment_store.update_comment(db, comment["id"], payload.comment_text)

	log_event("comment_updated", comment_id=comment["id"], user_id=comment["user_id"], request_id=request.state.request_id)
	return {"comment": updated}

@router.delete("/{comment_id}", response_model=CommentDeleted)
def delete_comment(
	request: Request,
	comment: dict = Depends(require_own_comment),
	db: Session = Depends(get_db),
):
	deleted = comment_store.delete_comment(db, comment["id"])

	log_event("comment_deleted", comment_id=comment["id"], user_id=comment["user_id"], request_id=request.state.request_id)
	return {"message": "Comment deleted successfully", "comment": deleted}

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.models.base import get_db
from app.schemas.comment import CommentCreate, CommentUpdate, CommentPage, CommentOut
from app.services.comments import CommentService
from app.utils.security import CurrentUser, get_current_user

router = APIRouter()


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)


def comment_owner(action: str):
    """Ownership gate resolved before the request body is validated."""

    def _check(
        commentId: str,
        current_user: CurrentUser = Depends(get_current_user),
        service: CommentService = Depends(get_comment_service),
    ) -> CurrentUser:
        service.owned(commentId, current_user.id, action)
        return current_user

    return _check


@router.get("", response_model=CommentPage)
def get_comments_by_product(
    productId: str,
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1),
    service: CommentService = Depends(get_comment_service),
):
    return service.list_for_product(productId, offset=offset, limit=limit)


@router.post("", response_model=CommentOut, status_code=201)
def create_comment(
    productId: str,
    payload: CommentCreate,
    service: CommentService = Depends(get_comment_service),
    current_user: CurrentUser = Depends(get_current_user),
):
    return service.create(productId, current_user.id, payload)


@router.put("/{commentId}", response_model=CommentOut)
def update_comment(
    commentId: str,
    payload: CommentUpdate,
    current_user: CurrentUser = Depends(comment_owner("update")),
    service: CommentService = Depends(get_comment_service),
):
    return service.update(commentId, current_user.id, payload)


@router.delete("/{commentId}")
def delete_comment(
    commentId: str,
    current_user: CurrentUser = Depends(comment_owner("delete")),
    service: CommentService = Depends(get_comment_service),
):
    return service.delete(commentId, current_user.id)

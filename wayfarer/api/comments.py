# api/comments.py
"""
Comments API Endpoints
CRUD over the comment collection
"""

from typing import List

from fastapi import APIRouter, Request, Response

from ..comments.service import CommentService
from ..schemas.api_schemas import Comment, CommentCreate, ErrorResponse, InitResponse

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(request: Request) -> CommentService:
    return request.app.state.comment_service


@router.get("", response_model=List[Comment])
async def list_comments(request: Request):
    """All comments, newest first"""
    return await get_comment_service(request).list_comments()


@router.get("/init", response_model=InitResponse)
async def init_comments(request: Request):
    """
    Create the backing collection if it does not exist yet.

    Safe to call repeatedly; a second call reports "already exists".
    """
    result = await get_comment_service(request).initialize()
    return InitResponse(created=result.created, reason=result.reason)


@router.post(
    "",
    response_model=Comment,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_comment(payload: CommentCreate, request: Request):
    """
    Add a comment. The id and timestamp are assigned here.

    Example:
        POST /comments
        {"name": "Ada", "text": "Loved the Lisbon suggestions"}
    """
    return await get_comment_service(request).create_comment(payload.name, payload.text)


@router.delete("/{comment_id}", status_code=204, responses={404: {"model": ErrorResponse}})
async def delete_comment(comment_id: str, request: Request):
    await get_comment_service(request).delete_comment(comment_id)
    return Response(status_code=204)

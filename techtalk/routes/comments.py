"""Comment routes addressed by comment id alone."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response

from techtalk.decorators import timed
from techtalk.dependencies import PostServiceDep, UserDBDep
from techtalk.managers import limiter
from techtalk.schemas.comment import MessageResponse

router = APIRouter(prefix="/comments", tags=["💬 Comments"])


@router.delete(
    "/{comment_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a comment",
    description="Delete a comment by id, locating the post that holds it.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "Comment deleted successfully"}},
            },
        },
        403: {"description": "Not the comment author"},
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Comment not found"}}},
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="comments_delete",
)
@timed("/comments/delete")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "30/minute")
async def delete_comment(
    request: Request,
    response: Response,
    comment_id: str,
    current_user: UserDBDep,
    service: PostServiceDep,
) -> MessageResponse:
    """
    Delete a comment.

    Parameters
    ----------
    comment_id : str
        Comment identifier.
    current_user : UserDB
        Must be the comment author or an admin.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    return await service.delete_comment_by_id(current_user, comment_id)

"""
Admin API Routes

Role bootstrap for fresh deployments: a signed-in caller may grant
themselves the admin flag.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from enchantedtome.api.dependencies import get_user_repository, require_authenticated
from enchantedtome.api.middleware.error_handler import NotFoundError
from enchantedtome.api.schemas import ErrorResponse, UserResponse
from enchantedtome.security import Identity
from enchantedtome.storage.user_repository import UserRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/make-admin",
    response_model=UserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not signed in"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
def make_admin(
    identity: Identity = Depends(require_authenticated),
    users: UserRepository = Depends(get_user_repository),
):
    """Set the admin flag on the caller's own user record."""
    user = users.update(identity.subject_id, is_admin=True)
    if user is None:
        raise NotFoundError("User", identity.subject_id)

    logger.warning(f"User {user.id} granted admin role")
    return UserResponse.model_validate(user)

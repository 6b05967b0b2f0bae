"""
Authentication API Routes for Enchanted Tome.

Tokens are issued by the identity provider; this router only reports
who the caller is according to the record store.
"""

from fastapi import APIRouter, Depends

from enchantedtome.api.dependencies import get_user_repository, require_authenticated
from enchantedtome.api.middleware.error_handler import UnauthorizedError
from enchantedtome.api.schemas import ErrorResponse, UserResponse
from enchantedtome.security import Identity
from enchantedtome.storage.user_repository import UserRepository

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/user",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Not signed in"}},
)
def read_current_user(
    identity: Identity = Depends(require_authenticated),
    users: UserRepository = Depends(get_user_repository),
):
    """Get the stored profile of the signed-in caller."""
    user = users.get(identity.subject_id)
    if user is None:
        raise UnauthorizedError("Unknown user")
    return UserResponse.model_validate(user)

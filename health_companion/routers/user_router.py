from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.auth_service import AuthService
from ..application.services.profile_service import ProfileService
from ..dependencies import get_auth_service, get_current_user, get_profile_service
from ..exceptions import ServerError
from ..schemas.common.common import ErrorResponse, MessageResponse
from ..schemas.users.user import (
    ChangePasswordRequest, DeleteAccountRequest, HealthProfileUpdate,
    PreferencesUpdate, UpdateProfileRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/user",
    tags=["User"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/profile")
def get_profile(
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    user = profiles.get_profile(current_user.id)
    return {"user": user.public_dict()}


@router.put("/profile")
def update_profile(
    body: UpdateProfileRequest,
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        user = profiles.update_profile(current_user.id, name=body.name, avatar=body.avatar)
        return {"message": "Profile updated successfully", "user": user.public_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating profile for user {current_user.id}: {e}")
        raise ServerError("Server error while updating profile")


@router.get("/health-profile")
def get_health_profile(
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    user = profiles.get_profile(current_user.id)
    return {"healthProfile": user.health_profile}


@router.put("/health-profile")
def update_health_profile(
    body: HealthProfileUpdate,
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        changes = body.model_dump(mode="json", exclude_unset=True)
        health_profile = profiles.update_health_profile(current_user.id, changes)
        return {"message": "Health profile updated successfully", "healthProfile": health_profile}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating health profile for user {current_user.id}: {e}")
        raise ServerError("Server error while updating health profile")


@router.get("/preferences")
def get_preferences(
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    user = profiles.get_profile(current_user.id)
    return {"preferences": user.preferences}


@router.put("/preferences")
def update_preferences(
    body: PreferencesUpdate,
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        preferences = profiles.update_preferences(
            current_user.id,
            notifications=body.notifications.model_dump() if body.notifications else None,
            theme=body.theme.value if body.theme else None,
        )
        return {"message": "Preferences updated successfully", "preferences": preferences}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating preferences for user {current_user.id}: {e}")
        raise ServerError("Server error while updating preferences")


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: UserDto = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        auth.change_password(current_user.id, body.currentPassword, body.newPassword)
        return {"message": "Password changed successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error changing password for user {current_user.id}: {e}")
        raise ServerError("Server error while changing password")


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    body: DeleteAccountRequest,
    current_user: UserDto = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        auth.delete_account(current_user.id, body.password)
        return {"message": "Account deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting account for user {current_user.id}: {e}")
        raise ServerError("Server error while deleting account")


@router.get("/dashboard")
def dashboard(
    current_user: UserDto = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        return profiles.dashboard(current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building dashboard for user {current_user.id}: {e}")
        raise ServerError("Server error while fetching dashboard")

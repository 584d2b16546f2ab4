from fastapi import Depends, HTTPException

from dependencies.auth import get_current_user, CurrentUser


def is_admin(user: CurrentUser) -> bool:
    return user.role == "admin"


def require_admin(user: CurrentUser):
    """Raise 403 if user is not an admin."""
    if not is_admin(user):
        raise HTTPException(
            status_code=403,
            detail="Admin role required",
        )


def admin_user(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """
    FastAPI dependency for admin-only screens:
        current_user: CurrentUser = Depends(admin_user)
    """
    require_admin(current_user)
    return current_user

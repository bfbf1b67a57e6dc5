from app.services.auth_dependencies import require_role, require_user_auth

__all__ = [
    "require_role",
    "require_user_auth",
]

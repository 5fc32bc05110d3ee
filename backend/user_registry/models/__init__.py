from user_registry.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, User

__all__ = [
    "User",
    "NAME_MAX_LENGTH",
    "EMAIL_MAX_LENGTH",
]

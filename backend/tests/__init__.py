# Force SQLModel table registration at test discovery time
# This ensures the model is registered before any test database creation
from user_registry.models.user import User  # noqa: F401

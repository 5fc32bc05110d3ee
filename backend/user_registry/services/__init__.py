"""
Services Layer

Business logic services that:
- Validate domain inputs before anything reaches storage
- Return domain outputs (models, ids)
- Do NOT depend on HTTP request/response objects or console I/O
"""

from user_registry.services.user_service import UserService

__all__ = ["UserService"]

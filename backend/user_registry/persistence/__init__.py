from user_registry.persistence.user_gateway import UserGateway

__all__ = ["UserGateway"]

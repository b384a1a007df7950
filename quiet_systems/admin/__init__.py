"""Admin package for the authenticated operator surface."""

from .gateway import AdminGateway, AdminUnauthorizedError, admin_serialize_alert, admin_serialize_health

__all__ = ["AdminGateway", "AdminUnauthorizedError", "admin_serialize_alert", "admin_serialize_health"]

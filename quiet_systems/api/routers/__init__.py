"""API router package for endpoint composition."""

from .admin import api_create_admin_router
from .automations import api_create_automations_router
from .health import api_create_health_router
from .payments import api_create_payments_router
from .sheets import api_create_sheets_router

__all__ = [
	"api_create_admin_router",
	"api_create_automations_router",
	"api_create_health_router",
	"api_create_payments_router",
	"api_create_sheets_router",
]

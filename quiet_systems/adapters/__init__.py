"""Adapter layer package for spreadsheet and payment provider boundaries."""

from .google_sheets import GoogleSheetsRevenueSource
from .http_support import adapter_create_http_client
from .interfaces import PaymentGatewayPort, RevenueSourcePort
from .paypal import PayPalPaymentGateway

__all__ = [
	"GoogleSheetsRevenueSource",
	"PayPalPaymentGateway",
	"PaymentGatewayPort",
	"RevenueSourcePort",
	"adapter_create_http_client",
]

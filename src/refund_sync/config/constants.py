"""
Centralized application constants.

Single point of truth for the Stripe and ShopMy wire values shared by the
handler, the services and the clients.
"""

# ==============================================================================
# STRIPE
# ==============================================================================

# Seconds a signed timestamp stays valid (Stripe library default)
SIGNATURE_TOLERANCE_SECONDS = 300

# Currency used when a charge carries none
DEFAULT_CURRENCY = "usd"

# Minor units per major unit (cents per dollar)
MINOR_UNITS_PER_MAJOR = 100

# ==============================================================================
# SHOPMY AFFILIATE API
# ==============================================================================

AFFILIATE_CANCEL_PATH = "cancel"
AFFILIATE_UPDATE_PATH = "update"

# Currency formatting
CURRENCY_DECIMAL_PLACES = 2

# ==============================================================================
# HTTP RESPONSES
# ==============================================================================

RESPONSE_OK = "ok"
RESPONSE_INTERNAL_ERROR = "Internal Error"
RESPONSE_METHOD_NOT_ALLOWED = "Method Not Allowed"
WEBHOOK_ERROR_PREFIX = "Webhook Error: "

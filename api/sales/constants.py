"""
Constants for sale operations.
"""

# Name fragments that classify a product as an allowance bottle when the
# product carries no explicit bottleSize tag
LARGE_BOTTLE_PHRASE = "large water bottle"
SMALL_BOTTLE_PHRASE = "small water bottle"

# Number of sales shown in a staff member's recent purchases
RECENT_PURCHASES_LIMIT = 5

# Allowed characters for client supplied idempotency keys (used as document ids)
IDEMPOTENCY_KEY_PATTERN = r"^[A-Za-z0-9_\-]{8,128}$"

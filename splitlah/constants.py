from decimal import Decimal

SG_GST_RATE = Decimal("0.09")
SG_SERVICE_CHARGE_RATE = Decimal("0.10")

CENT = Decimal("0.01")

# Person colors, assigned round-robin by roster position
PALETTE = (
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#8b5cf6",  # violet
    "#ef4444",  # red
    "#ec4899",  # pink
    "#6366f1",  # indigo
)

MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MB

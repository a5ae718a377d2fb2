# seatwatch — Schemas
# Inventory snapshot (inbound) and webhook payload (outbound)

from seatwatch.schemas.inventory import SeatArrangement, CarInventory, InventorySnapshot   # noqa
from seatwatch.schemas.notification import EmbedField, Embed, WebhookPayload             # noqa

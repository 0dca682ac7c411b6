"""Inventory bounded context — per-product stock levels and reservations.

Tracks on-hand stock and reserved quantities (CQRS) and reacts to Ordering
events to reserve, confirm and release stock.
"""

from protean.domain import Domain
from shared.logging import configure_logging, get_logger

configure_logging()

inventory = Domain(name="inventory")

logger = get_logger(__name__)

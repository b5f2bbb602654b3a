"""
Domain value objects package

Contains immutable value objects that represent concepts in the business domain.
"""

from .entity_ref import (
    EntityRef,
    Populated,
    Reference,
    entity_ref_id,
    entity_ref_to_wire,
    parse_entity_ref,
)
from .order_status import (
    ALLOWED_TRANSITIONS,
    NEXT_IN_CHAIN,
    TERMINAL_STATUSES,
    OrderStatus,
    allowed_targets,
    can_transition,
    next_in_chain,
)

__all__ = [
    "EntityRef",
    "Reference",
    "Populated",
    "parse_entity_ref",
    "entity_ref_id",
    "entity_ref_to_wire",
    "OrderStatus",
    "ALLOWED_TRANSITIONS",
    "NEXT_IN_CHAIN",
    "TERMINAL_STATUSES",
    "allowed_targets",
    "can_transition",
    "next_in_chain",
]

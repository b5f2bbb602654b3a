"""
Entity reference value objects

The API returns related entities either as a bare identifier or as a
populated object. Both shapes are modelled here so call sites only ever ask
for the identifier through entity_ref_id().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Reference:
    """Unpopulated reference: only the identifier is known"""

    id: str

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Reference id must be a non-empty string")

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Populated:
    """Populated reference: identifier plus the embedded document"""

    id: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Populated entity must carry a non-empty id")

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __str__(self) -> str:
        return self.id


EntityRef = Union[Reference, Populated]


def parse_entity_ref(raw: Any) -> Optional[EntityRef]:
    """Build an EntityRef from a wire value; None when the entity did not resolve"""
    if raw is None:
        return None
    if isinstance(raw, (Reference, Populated)):
        return raw
    if isinstance(raw, str):
        return Reference(raw) if raw else None
    if isinstance(raw, dict):
        entity_id = raw.get("_id") or raw.get("id")
        if not entity_id:
            return None
        return Populated(str(entity_id), dict(raw))
    raise ValueError(f"Unsupported entity reference: {raw!r}")


def entity_ref_id(ref: Optional[EntityRef]) -> Optional[str]:
    """Identifier of a reference regardless of its shape"""
    if ref is None:
        return None
    return ref.id


def entity_ref_to_wire(ref: Optional[EntityRef]) -> Any:
    if ref is None:
        return None
    if isinstance(ref, Populated):
        return dict(ref.data) or {"_id": ref.id}
    return ref.id

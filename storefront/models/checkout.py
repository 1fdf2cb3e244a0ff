"""
Checkout data contracts.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Dict, Any


@dataclass(frozen=True)
class Address:
    """A saved shipping address as served by GET /user/addresses."""
    id: str
    address: str

    def to_dict(self) -> Dict[str, Any]:
        return {"_id": self.id, "address": self.address}


class CheckoutPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating-eligibility"
    BLOCKED = "blocked"
    PLACING_ORDER = "placing-order"
    COMPLETED = "completed"


class BlockReason(str, Enum):
    INSUFFICIENT_BALANCE = "insufficient-balance"
    NO_ADDRESS = "no-address"


@dataclass(frozen=True)
class CheckoutState:
    balance: float = 0
    addresses: Tuple[Address, ...] = ()
    selected_index: Optional[int] = None
    new_address: str = ""
    phase: CheckoutPhase = CheckoutPhase.IDLE
    block_reason: Optional[BlockReason] = None
    error: Optional[str] = None
    loading: bool = False

    @property
    def selected_address(self) -> Optional[Address]:
        if self.selected_index is None:
            return None
        if 0 <= self.selected_index < len(self.addresses):
            return self.addresses[self.selected_index]
        return None

    def is_eligible(self, cart_total: float) -> bool:
        """Balance covers the cart and a valid address is selected."""
        return self.balance >= cart_total and self.selected_address is not None

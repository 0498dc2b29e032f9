from dataclasses import dataclass
from decimal import Decimal

from donation_gallery.core.accounting import from_wei


@dataclass(frozen=True)
class ContractConfig:
    commission_rate: int  # plain percentage 0-100
    recipient: str
    minimum_price_wei: int

    @property
    def minimum_price(self) -> Decimal:
        return from_wei(self.minimum_price_wei)


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    block_number: int | None = None
    status: int = 1

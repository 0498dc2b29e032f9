"""Price parsing and donation/owner split arithmetic.

All amounts are ``Decimal`` values in the currency's major unit (ETH).
The smallest representable amount is one wei (1e-18 ETH); donations are
truncated to whole wei so the owner share absorbs the remainder and the two
parts always add up to the amount paid.
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from donation_gallery.core.exceptions import ValidationError

WEI_PER_ETHER = 10**18
_WEI = Decimal("1e-18")
# Enough digits for any uint256 amount expressed in ether
_PRECISION = 96
# uint256 max is ~1.16e77 wei, i.e. ~1.16e59 ether
MAX_WEI = 2**256 - 1


@dataclass(frozen=True)
class PurchaseResult:
    total_paid: Decimal
    donated_amount: Decimal
    owner_amount: Decimal
    commission_rate: int

    @property
    def owner_rate(self) -> int:
        return 100 - self.commission_rate


def parse_price(value: str | Decimal) -> Decimal:
    """Parse a user-entered price in ETH. Rejects negatives and sub-wei precision."""
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"'{value}' is not a valid price.")
    if not price.is_finite():
        raise ValidationError(f"'{value}' is not a valid price.")
    if price < 0:
        raise ValidationError("The price cannot be negative.")
    if price > 0 and price.adjusted() > 59:
        raise ValidationError(f"'{value}' is larger than the currency supports.")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        try:
            exact = price == price.quantize(_WEI, rounding=ROUND_DOWN)
        except InvalidOperation:
            raise ValidationError(f"'{value}' is not a valid price.")
        if not exact:
            raise ValidationError(f"'{value}' has more decimals than the currency supports.")
        if price * WEI_PER_ETHER > MAX_WEI:
            raise ValidationError(f"'{value}' is larger than the currency supports.")
    return price


def to_wei(amount: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        wei = amount * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValidationError(f"{amount} is not a whole number of wei.")
    return int(wei)


def from_wei(wei: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(wei) / WEI_PER_ETHER


def split_payment(total: Decimal, commission_rate: int) -> PurchaseResult:
    """Split ``total`` into the donated part and the owner share."""
    if not 0 <= commission_rate <= 100:
        raise ValidationError(f"Commission rate {commission_rate} is outside 0-100.")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        donated = (total * commission_rate / 100).quantize(_WEI, rounding=ROUND_DOWN)
        owner = total - donated
    return PurchaseResult(
        total_paid=total,
        donated_amount=donated,
        owner_amount=owner,
        commission_rate=commission_rate,
    )


def format_amount(amount: Decimal) -> str:
    """Render an amount without exponent or trailing zeros ("0.0050" -> "0.005")."""
    if amount == 0:
        return "0"
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return format(amount.normalize(), "f")


def describe_split(result: PurchaseResult, recipient: str, currency: str = "ETH") -> str:
    """One-line breakdown shared by the gallery cards and the purchase confirmation."""
    return (
        f"{format_amount(result.donated_amount)} {currency} ({result.commission_rate}%) "
        f"is donated to {recipient} and "
        f"{format_amount(result.owner_amount)} {currency} ({result.owner_rate}%) "
        f"goes to the contract owner."
    )


def describe_purchase(result: PurchaseResult, recipient: str, currency: str = "ETH") -> str:
    return (
        f"Purchase completed. You paid {format_amount(result.total_paid)} {currency}: "
        + describe_split(result, recipient, currency)
    )

"""
GST calculator for purchase documents.

Pure Decimal arithmetic, no database or network access. Given document lines
(quantity, price, GST rate) and the document-level discount, other charges
and manual rounding adjustment it produces per-line CGST/SGST/IGST amounts,
the aggregate totals and a breakdown per (rate, GST type).

  * Same state for buyer and supplier -> the rate is split in half as
    CGST + SGST.
  * Different states -> the full rate is charged as IGST.
  * Either state missing -> IGST, with a warning for the caller to surface.

grand_total = subtotal - discount + total_gst + other_charges + rounding_adjustment
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, ROUND_CEILING, ROUND_FLOOR
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

CGST_SGST = "cgst_sgst"
IGST = "igst"
GST_TYPES = (CGST_SGST, IGST)

DISCOUNT_FLAT = "flat"
DISCOUNT_PERCENTAGE = "percentage"

MISSING_STATE_WARNING = (
    "Admin or supplier state not configured. Defaulting to IGST. "
    "Please set the state in Settings for accurate GST calculations."
)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Largest magnitude accepted for a single numeric input
MAX_INPUT = Decimal("1e12")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def to_decimal(value) -> Decimal:
    """
    Parse numeric input; None, blanks and malformed values count as 0.
    So do values of MAX_INPUT or more in magnitude.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite() or abs(result) >= MAX_INPUT:
        return ZERO
    return result


def money(value) -> Decimal:
    """Round half-up to 2 decimal places."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize_state(state: Optional[str]) -> str:
    """Case-insensitive, whitespace-free form used for state comparison."""
    if not state:
        return ""
    return "".join(str(state).split()).lower()


def determine_gst_type(admin_state: Optional[str], counterparty_state: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Pick CGST+SGST or IGST for a document.

    Returns (gst_type, warning); warning is None unless a state is missing.
    """
    admin = normalize_state(admin_state)
    other = normalize_state(counterparty_state)
    if not admin or not other:
        return IGST, MISSING_STATE_WARNING
    return (CGST_SGST if admin == other else IGST), None


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class LineResult:
    """GST figures for a single document line."""
    quantity: Decimal
    price: Decimal
    gst_percentage: Decimal
    gst_type: str
    item_total: Decimal
    cgst_percentage: Decimal
    sgst_percentage: Decimal
    igst_percentage: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    total_gst_amount: Decimal
    total_price: Decimal

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass
class BreakdownRow:
    """Aggregated figures for one (rate, GST type) group."""
    gst_percentage: Decimal
    gst_type: str
    taxable_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    total_gst_amount: Decimal = ZERO


@dataclass
class DocumentTotals:
    """Totals of a purchase order or bill."""
    gst_type: str
    subtotal: Decimal
    total_quantity: Decimal
    discount: Decimal
    discount_type: str
    discount_amount: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_gst: Decimal
    other_charges: Decimal
    before_rounding: Decimal
    rounding_adjustment: Decimal
    grand_total: Decimal
    lines: List[LineResult] = field(default_factory=list)
    breakdown: List[BreakdownRow] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)

    def model_fields(self) -> Dict[str, Decimal]:
        """Document-level values as stored on PurchaseOrder / Bill rows."""
        return {
            "gst_type": self.gst_type,
            "sub_total": self.subtotal,
            "total_quantity": self.total_quantity,
            "discount": self.discount,
            "discount_type": self.discount_type,
            "total_discount": self.discount_amount,
            "total_cgst": self.total_cgst,
            "total_sgst": self.total_sgst,
            "total_igst": self.total_igst,
            "total_gst": self.total_gst,
            "other_charges": self.other_charges,
            "rounding_adjustment": self.rounding_adjustment,
            "grand_total": self.grand_total,
        }


# ---------------------------------------------------------------------------
# Calculations
# ---------------------------------------------------------------------------

def calculate_line(quantity, price, gst_percentage, gst_type: str) -> LineResult:
    """Compute item total and the GST split for one line."""
    if gst_type not in GST_TYPES:
        raise ValueError(f"Unknown GST type: {gst_type!r}")

    qty = to_decimal(quantity)
    unit_price = to_decimal(price)
    rate = to_decimal(gst_percentage)
    item_total = money(qty * unit_price)

    if gst_type == CGST_SGST:
        half = rate / 2
        cgst_pct, sgst_pct, igst_pct = half, half, ZERO
    else:
        cgst_pct, sgst_pct, igst_pct = ZERO, ZERO, rate

    cgst_amount = money(item_total * cgst_pct / HUNDRED)
    sgst_amount = money(item_total * sgst_pct / HUNDRED)
    igst_amount = money(item_total * igst_pct / HUNDRED)
    total_gst = cgst_amount + sgst_amount + igst_amount

    return LineResult(
        quantity=qty,
        price=unit_price,
        gst_percentage=rate,
        gst_type=gst_type,
        item_total=item_total,
        cgst_percentage=cgst_pct,
        sgst_percentage=sgst_pct,
        igst_percentage=igst_pct,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        igst_amount=igst_amount,
        total_gst_amount=total_gst,
        total_price=item_total + total_gst,
    )


def calculate_discount(subtotal, discount, discount_type: str = DISCOUNT_FLAT) -> Decimal:
    """Flat amount as entered, or a percentage of the subtotal."""
    value = to_decimal(discount)
    if discount_type == DISCOUNT_PERCENTAGE:
        return money(to_decimal(subtotal) * value / HUNDRED)
    return money(value)


def _line_value(line, *names):
    if isinstance(line, Mapping):
        for name in names:
            if name in line:
                return line[name]
        return None
    for name in names:
        if hasattr(line, name):
            return getattr(line, name)
    return None


def calculate_totals(
    items: Iterable,
    gst_type: str,
    discount=0,
    discount_type: str = DISCOUNT_FLAT,
    other_charges=0,
    rounding_adjustment=0,
    quantity_field: str = "quantity",
) -> DocumentTotals:
    """
    Recompute every derived figure of a document from its lines.

    `items` may hold mappings or objects exposing the quantity field
    (`quantity` by default, `quantity_received` for bills), `price` and
    `gst_percentage`.
    """
    lines = [
        calculate_line(
            _line_value(item, quantity_field),
            _line_value(item, "price", "purchase_price", "unit_price"),
            _line_value(item, "gst_percentage"),
            gst_type,
        )
        for item in items
    ]

    subtotal = sum((line.item_total for line in lines), ZERO)
    total_quantity = sum((line.quantity for line in lines), ZERO)
    total_cgst = sum((line.cgst_amount for line in lines), ZERO)
    total_sgst = sum((line.sgst_amount for line in lines), ZERO)
    total_igst = sum((line.igst_amount for line in lines), ZERO)
    total_gst = total_cgst + total_sgst + total_igst

    discount_amount = calculate_discount(subtotal, discount, discount_type)
    charges = money(other_charges)
    rounding = money(rounding_adjustment)
    before_rounding = subtotal - discount_amount + total_gst + charges

    return DocumentTotals(
        gst_type=gst_type,
        subtotal=subtotal,
        total_quantity=total_quantity,
        discount=to_decimal(discount),
        discount_type=discount_type if discount_type == DISCOUNT_PERCENTAGE else DISCOUNT_FLAT,
        discount_amount=discount_amount,
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        total_igst=total_igst,
        total_gst=total_gst,
        other_charges=charges,
        before_rounding=before_rounding,
        rounding_adjustment=rounding,
        grand_total=before_rounding + rounding,
        lines=lines,
        breakdown=gst_breakdown(lines),
    )


def gst_breakdown(lines: Iterable[LineResult]) -> List[BreakdownRow]:
    """Group line GST by (rate, GST type), ordered by rate."""
    groups: Dict[Tuple[Decimal, str], BreakdownRow] = {}
    for line in lines:
        key = (line.gst_percentage, line.gst_type)
        row = groups.setdefault(key, BreakdownRow(gst_percentage=line.gst_percentage, gst_type=line.gst_type))
        row.taxable_amount += line.item_total
        row.cgst_amount += line.cgst_amount
        row.sgst_amount += line.sgst_amount
        row.igst_amount += line.igst_amount
        row.total_gst_amount += line.total_gst_amount
    return [groups[key] for key in sorted(groups)]


def rounding_options(before_rounding) -> Dict[str, Decimal]:
    """
    Deltas offered next to the manual rounding field: up to the next
    integer and down to the previous one. Never applied automatically.
    """
    value = money(before_rounding)
    round_up = value.to_integral_value(rounding=ROUND_CEILING) - value
    round_down = value.to_integral_value(rounding=ROUND_FLOOR) - value
    return {"round_up": money(round_up), "round_down": money(round_down)}

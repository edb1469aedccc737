"""
Stock movement services.

Every change to an item's quantity or a processing pool goes through here so
the item status, the StockAdjustment trail and the pool valuation stay in
step. Callers are expected to run inside transaction.atomic(); rows are
locked with select_for_update before they are changed.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from django.db import transaction
from django.utils import timezone
from inventory_admin.catalog.models import Item
from inventory_admin.core.exceptions import DomainError, InsufficientPoolStock
from inventory_admin.core.utils import create_with_document_number
from .models import StockAdjustment, ProcessingPool, ProcessingRecipe, ProcessingTransaction

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
QTY = Decimal('0.001')
MONEY = Decimal('0.01')
UNIT_COST = Decimal('0.0001')


def _q(value, places):
    return Decimal(value).quantize(places, rounding=ROUND_HALF_UP)


def _fmt(value):
    """Quantity for messages: 12.500 -> 12.5, 3.000 -> 3"""
    return format(Decimal(value).normalize(), 'f')


def change_item_stock(item, delta, method, reason='other', user=None, warehouse=None,
                      reason_details='', notes='', grn_number='', po_number='',
                      batch_number='', expiry_date=None, allow_negative=False):
    """
    Apply `delta` to an item's quantity and record the adjustment.

    Decreases stop at zero unless `allow_negative` is set. Returns the
    StockAdjustment, or None when nothing changed.
    """
    item = Item.objects.select_for_update().get(pk=item.pk)
    previous = item.quantity
    new_quantity = previous + Decimal(delta)
    if new_quantity < 0 and not allow_negative:
        new_quantity = ZERO

    applied = new_quantity - previous
    if applied == 0:
        return None

    item.quantity = new_quantity
    item.refresh_status()
    item.save(update_fields=['quantity', 'status', 'updated_at'])

    adjustment = StockAdjustment.objects.create(
        item=item,
        warehouse=warehouse or item.warehouse,
        adjustment_method=method,
        adjustment_type='increase' if applied > 0 else 'decrease',
        quantity=abs(applied),
        previous_quantity=previous,
        new_quantity=new_quantity,
        reason=reason,
        reason_details=reason_details,
        grn_number=grn_number,
        po_number=po_number,
        batch_number=batch_number,
        expiry_date=expiry_date,
        notes=notes,
        created_by=user if user is not None and user.is_authenticated else None,
    )
    logger.info(f"Stock {adjustment.adjustment_type} for item {item.id}: {previous} -> {new_quantity} ({method})")
    if item.status != Item.IN_STOCK:
        logger.warning(f"Item {item.id} '{item.item_name}' is {item.status} (qty {new_quantity}, alert {item.low_stock_alert_level})")
    return adjustment


def add_to_pool(item, warehouse, quantity, unit_price):
    """
    Add purchased stock of a processing item to its pool, creating the pool
    on first use. The pool price is the weighted average of everything
    added so far.
    """
    if not item.is_processing:
        raise DomainError(f"Item '{item.item_name}' is not a processing item.")

    quantity = Decimal(quantity)
    unit_price = Decimal(unit_price)
    pool, created = ProcessingPool.objects.select_for_update().get_or_create(
        item=item,
        warehouse=warehouse,
        defaults={
            'uom': item.uom,
            'current_stock': quantity,
            'avg_purchase_price': _q(unit_price, UNIT_COST),
            'total_value': _q(quantity * unit_price, MONEY),
            'total_purchased': quantity,
            'status': 'active',
        },
    )
    if created:
        logger.info(f"Created processing pool {pool.id} for item {item.id} with {quantity} {item.uom}")
        return pool

    new_total_value = pool.total_value + quantity * unit_price
    new_stock = pool.current_stock + quantity
    pool.current_stock = new_stock
    pool.total_value = _q(new_total_value, MONEY)
    if new_stock > 0:
        pool.avg_purchase_price = _q(new_total_value / new_stock, UNIT_COST)
    pool.total_purchased += quantity
    pool.save()
    logger.info(f"Added {quantity} {pool.uom} to processing pool {pool.id}; avg price now {pool.avg_purchase_price}")
    return pool


def adjust_pool(item, warehouse, quantity_delta, value_delta):
    """
    Move a pool by a net quantity and value, e.g. the difference between
    the old and new lines of an edited bill. Stock and value floor at zero.
    """
    quantity_delta = Decimal(quantity_delta)
    value_delta = Decimal(value_delta)
    pool = ProcessingPool.objects.select_for_update().filter(item=item, warehouse=warehouse).first()
    if pool is None:
        if quantity_delta > 0:
            return add_to_pool(item, warehouse, quantity_delta, value_delta / quantity_delta)
        logger.warning(f"No processing pool for item {item.id} in warehouse {warehouse.id}; nothing to reverse")
        return None

    pool.current_stock = max(pool.current_stock + quantity_delta, ZERO)
    pool.total_purchased = max(pool.total_purchased + quantity_delta, ZERO)
    remaining_value = max(pool.total_value + value_delta, ZERO)
    if pool.current_stock > 0:
        pool.total_value = _q(remaining_value, MONEY)
        pool.avg_purchase_price = _q(remaining_value / pool.current_stock, UNIT_COST)
    else:
        pool.total_value = ZERO
    pool.save()
    logger.info(f"Pool {pool.id} moved by {quantity_delta} {pool.uom}; avg price now {pool.avg_purchase_price}")
    return pool


def remove_from_pool(item, warehouse, quantity, unit_price):
    """Undo an earlier add_to_pool (bill delete); floors at zero"""
    quantity = Decimal(quantity)
    return adjust_pool(item, warehouse, -quantity, -quantity * Decimal(unit_price))


def _bill_line_quantity(line):
    if line.quantity_accepted is not None:
        return line.quantity_accepted
    return line.quantity_received or ZERO


def bill_stock_lines(bill):
    """
    Accepted quantity and purchase value per (item, warehouse) on a bill.
    Taken before an edit so only the difference is moved afterwards.
    """
    received = {}
    for line in bill.items.select_related('item').all():
        quantity = _bill_line_quantity(line)
        if line.item is None or quantity <= 0:
            continue
        entry = received.setdefault((line.item_id, bill.warehouse_id), {
            'item': line.item,
            'warehouse': bill.warehouse,
            'quantity': ZERO,
            'value': ZERO,
            'batch_number': line.batch_number or '',
            'expiry_date': line.expiry_date,
        })
        entry['quantity'] += quantity
        entry['value'] += quantity * line.price
    return received


def _move_bill_stock(bill, before, after, user, details):
    for key in sorted(before.keys() | after.keys()):
        old, new = before.get(key), after.get(key)
        entry = new or old
        quantity = (new['quantity'] if new else ZERO) - (old['quantity'] if old else ZERO)
        value = (new['value'] if new else ZERO) - (old['value'] if old else ZERO)

        if entry['item'].is_processing:
            if quantity or value:
                adjust_pool(entry['item'], entry['warehouse'], quantity, value)
            continue
        if not quantity:
            continue
        change_item_stock(
            entry['item'], quantity, 'purchase_order',
            reason='purchase' if quantity > 0 else 'purchase_reversal',
            user=user,
            warehouse=entry['warehouse'],
            reason_details=f"{details} {bill.grn_number}",
            grn_number=bill.grn_number,
            po_number=bill.po_number or '',
            batch_number=entry['batch_number'],
            expiry_date=entry['expiry_date'] if quantity > 0 else None,
        )


def apply_bill_stock(bill, user=None):
    """
    Receive the accepted quantities of a bill into stock. Processing items
    go to their pool at the line price; regular items increase inventory.
    """
    _move_bill_stock(bill, {}, bill_stock_lines(bill), user, 'Received against')
    logger.info(f"Stock applied for bill {bill.grn_number}")


def update_bill_stock(bill, before, user=None):
    """
    Move stock by the difference between `before` (bill_stock_lines taken
    ahead of the edit) and the bill's current lines. An unchanged bill
    moves nothing.
    """
    _move_bill_stock(bill, before, bill_stock_lines(bill), user, 'Edited')
    logger.info(f"Stock updated for edited bill {bill.grn_number}")


def reverse_bill_stock(bill, user=None):
    """Take a bill's quantities back out of stock (floor 0)"""
    _move_bill_stock(bill, bill_stock_lines(bill), {}, user, 'Reversed')
    logger.info(f"Stock reversed for bill {bill.grn_number}")


def seed_pool_from_opening_stock(item):
    """Processing items keep zero inventory; their opening stock seeds the pool"""
    if item.opening_stock and item.opening_stock > 0:
        return add_to_pool(item, item.warehouse, item.opening_stock, item.purchase_price)
    return None


@transaction.atomic
def process_pool_stock(pool, input_quantity, outputs, wastage_percent=0, processing_cost=0,
                       notes='', user=None, input_item=None):
    """
    Convert pool stock into finished items.

    `outputs` is a list of {'item': Item, 'quantity': Decimal}. The pool is
    charged at its average price; each output item's stock is increased
    and its recipe row updated.
    """
    pool = ProcessingPool.objects.select_for_update().select_related('item', 'warehouse').get(pk=pool.pk)
    input_quantity = Decimal(input_quantity)
    input_item = input_item or pool.item
    for output in outputs:
        if output['item'].is_processing:
            raise DomainError(f"Processing item '{output['item'].item_name}' cannot be a processing output.")

    if pool.current_stock < input_quantity:
        raise InsufficientPoolStock(
            f"Insufficient stock in processing pool. Available: {_fmt(pool.current_stock)} {pool.uom}"
        )

    wastage_percent = Decimal(wastage_percent or 0)
    processing_cost = _q(Decimal(processing_cost or 0), MONEY)
    unit_cost = pool.avg_purchase_price
    input_total_cost = _q(input_quantity * unit_cost, MONEY)
    wastage_quantity = _q(input_quantity * wastage_percent / Decimal('100'), QTY)
    now = timezone.now()

    fields = dict(
        pool=pool,
        input_item=input_item,
        input_quantity=input_quantity,
        input_uom=input_item.uom,
        input_unit_cost=unit_cost,
        input_total_cost=input_total_cost,
        warehouse=pool.warehouse,
        outputs=[
            {
                'item_id': output['item'].id,
                'item_name': output['item'].item_name,
                'quantity': str(output['quantity']),
                'uom': output['item'].uom,
            }
            for output in outputs
        ],
        wastage_percent=wastage_percent,
        wastage_quantity=wastage_quantity,
        processing_cost=processing_cost,
        total_cost=input_total_cost + processing_cost,
        notes=notes or '',
        status='completed',
        processed_at=now,
        created_by=user if user is not None and user.is_authenticated else None,
    )
    record = create_with_document_number(
        ProcessingTransaction, 'transaction_number', 'PT',
        lambda number: ProcessingTransaction.objects.create(transaction_number=number, **fields),
    )

    new_stock = pool.current_stock - input_quantity
    pool.current_stock = new_stock
    pool.total_value = _q(new_stock * unit_cost, MONEY)
    pool.total_processed += input_quantity
    pool.total_wastage += wastage_quantity
    pool.save()

    for output in outputs:
        output_item = output['item']
        quantity = Decimal(output['quantity'])
        change_item_stock(
            output_item, quantity, 'processing',
            reason='processing',
            user=user,
            warehouse=pool.warehouse,
            reason_details=f"Processed from {input_item.item_name} ({record.transaction_number})",
            notes=f"Processing transaction: {record.transaction_number}",
        )
        recipe, created = ProcessingRecipe.objects.select_for_update().get_or_create(
            pool=pool,
            output_item=output_item,
            defaults={
                'input_item': input_item,
                'output_uom': output_item.uom,
                'times_created': 1,
                'total_quantity': quantity,
                'last_created_at': now,
            },
        )
        if not created:
            recipe.times_created += 1
            recipe.total_quantity += quantity
            recipe.last_created_at = now
            recipe.save(update_fields=['times_created', 'total_quantity', 'last_created_at'])

    logger.info(f"Processing {record.transaction_number}: {input_quantity} {pool.uom} from pool {pool.id}, "
                f"{len(outputs)} output(s), wastage {wastage_quantity}")
    return record

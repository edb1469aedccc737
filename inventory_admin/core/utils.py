"""Utility functions for audit logging, document numbering and admin lookups"""
import logging
from django.db import IntegrityError, transaction
from django.utils import timezone
from .models import AuditLog, User

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """First address of X-Forwarded-For, else REMOTE_ADDR"""
    meta = getattr(request, 'META', None) or {}
    forwarded = meta.get('HTTP_X_FORWARDED_FOR', '')
    address = forwarded.split(',')[0].strip() if forwarded else meta.get('REMOTE_ADDR', '')
    return address or None


def _acting_user(request, user):
    candidate = user or getattr(request, 'user', None)
    return candidate if candidate is not None and candidate.is_authenticated else None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Record who did what to which object.

    `user` overrides the request user; `object_reference` holds document
    numbers (PO, GRN, PT) so entries can be searched by them. Returns the
    entry, or None when it was skipped or could not be written; the calling
    operation is never failed by auditing.
    """
    if not (action and model_name and object_id):
        logger.warning(f"Skipped audit entry for {model_name or '?'}#{object_id or '?'}: action, model and id are required")
        return None
    try:
        return AuditLog.objects.create(
            user=_acting_user(request, user),
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request),
        )
    except Exception as e:
        logger.error(f"Could not write audit entry {action} {model_name}#{object_id}: {str(e)}")
        return None


def next_document_number(model, field, prefix, year=None, width=3):
    """
    Next yearly sequence number for a document, e.g. PO-2025-001.

    Looks at the highest existing number with the `{prefix}-{year}-` stem and
    increments it. Numbers that fail to parse are ignored.
    """
    year = year or timezone.now().year
    stem = f"{prefix}-{year}-"
    existing = model.objects.filter(**{f'{field}__startswith': stem}).values_list(field, flat=True)

    last_number = 0
    for value in existing:
        try:
            last_number = max(last_number, int(value.split('-')[2]))
        except (IndexError, ValueError):
            continue

    number = f"{stem}{str(last_number + 1).zfill(width)}"
    logger.debug(f"Generated document number {number} for {model.__name__}.{field}")
    return number


def create_with_document_number(model, field, prefix, create, attempts=3):
    """
    Call `create(number)` with the next document number.

    Two concurrent creates can read the same highest number; the loser hits
    the unique constraint and retries with a fresh number. Other integrity
    errors are raised as they are.
    """
    for attempt in range(1, attempts + 1):
        number = next_document_number(model, field, prefix)
        try:
            with transaction.atomic():
                return create(number)
        except IntegrityError:
            if attempt == attempts or not model.objects.filter(**{field: number}).exists():
                raise
            logger.warning(f"Document number {number} was taken concurrently; retrying ({attempt}/{attempts})")


def get_admin_state(user=None):
    """
    State of the admin business, used to pick CGST+SGST vs IGST.

    The requesting user's own state wins; otherwise the first superuser that
    has one configured. Returns '' when nobody has set a state.
    """
    if user is not None and getattr(user, 'is_authenticated', False) and getattr(user, 'state', ''):
        return user.state
    admin = User.objects.filter(is_superuser=True).exclude(state='').order_by('id').first()
    return admin.state if admin else ''

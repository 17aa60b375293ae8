"""
Expiry Alert Pipeline

Sends one alert email per distinct expiry date among vendors whose documents
expire in exactly 15 days, or expired exactly 15 or 60 days ago:
1. Fetch alert rows from the vendor database
2. Drop rows with a blank vendor name, document number or email
3. Group the remaining rows by expiry date
4. Send one email per group to its deduplicated recipients
"""

from datetime import date
from typing import Iterable, List, Optional

from vendor_expiry.email_body_generator import (
    format_expiry_date,
    generate_alert_body,
    generate_alert_subject,
)
from vendor_expiry.email_sender import send_email
from vendor_expiry.exceptions import AlertDeliveryError
from vendor_expiry.logger import get_logger
from vendor_expiry.models import ExpiryGroups, ServiceContext, VendorRecord
from vendor_expiry.vendor_repository import fetch_alert_records

logger = get_logger(__name__)


def group_by_expiry(records: Iterable[VendorRecord]) -> ExpiryGroups:
    """
    Group alert rows by exact expiry date.

    Values are trimmed; a row is skipped if its vendor name, document number
    or email is blank after trimming.

    Returns:
        Dict of expiry date -> trimmed records, in first-seen order
    """
    groups: ExpiryGroups = {}
    skipped = 0

    for record in records:
        name = record.vendor_name.strip()
        document = record.document_number.strip()
        email = record.email.strip()

        if not name or not document or not email:
            skipped += 1
            continue

        trimmed = VendorRecord(
            vendor_name=name,
            document_number=document,
            expiry_date=record.expiry_date,
            email=email,
        )
        groups.setdefault(record.expiry_date, []).append(trimmed)

    if skipped:
        logger.debug(f"Skipped {skipped} alert row(s) with a blank name, document or email")

    return groups


def distinct_emails(vendors: Iterable[VendorRecord]) -> List[str]:
    """
    Return the group's email addresses, deduplicated case-insensitively.

    The first-seen casing of each address is kept.
    """
    seen = set()
    emails = []
    for vendor in vendors:
        email = vendor.email
        if not email.strip():
            continue
        key = email.casefold()
        if key not in seen:
            seen.add(key)
            emails.append(email)
    return emails


def send_expiry_alerts(context: ServiceContext, today: Optional[date] = None) -> int:
    """
    Run the expiry alert pipeline once.

    A failed send is logged and the remaining groups are still processed.

    Args:
        context: Service context; a stop request skips the groups not yet sent
        today: Reference date for the alert query (defaults to today)

    Returns:
        Number of alert emails sent (0 if the database is not configured)

    Raises:
        AlertDeliveryError: If one or more groups could not be sent
        Exception: Database errors propagate unchanged
    """
    records = fetch_alert_records(today)
    if records is None:
        return 0

    groups = group_by_expiry(records)
    logger.info(f"Found {len(groups)} expiry date(s) to alert on")

    sent = 0
    failed_dates = []

    for expiry_date, vendors in groups.items():
        if context.stop_requested:
            logger.info("Stop requested. Skipping remaining expiry alerts.")
            break

        recipients = distinct_emails(vendors)
        to = ",".join(recipients)
        date_str = format_expiry_date(expiry_date)

        try:
            send_email(
                to_emails=recipients,
                subject=generate_alert_subject(expiry_date),
                body=generate_alert_body(expiry_date, vendors),
            )
        except Exception as e:
            logger.error(f"Failed to send expiry alert for {date_str} to {to}: {str(e)}", exc_info=True)
            failed_dates.append(expiry_date)
            continue

        sent += 1
        logger.info(f"Sent expiry alert for {date_str} to {to}")

    if failed_dates:
        raise AlertDeliveryError(failed_dates)

    return sent

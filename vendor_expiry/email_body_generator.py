"""
Email Body Generator Module

This module generates the subject lines and plain-text bodies for the
vendor expiry alert emails.
"""

from datetime import date
from typing import List

from vendor_expiry.config import ALERT_SUBJECT_TEMPLATE
from vendor_expiry.models import VendorRecord


def format_expiry_date(expiry_date: date) -> str:
    """Format an expiry date as YYYY-MM-DD (years below 1000 are zero-padded)."""
    return expiry_date.isoformat()


def generate_alert_subject(expiry_date: date) -> str:
    """
    Generate the alert subject line.

    Format: "Document Expiry Alert - <YYYY-MM-DD>"
    """
    return ALERT_SUBJECT_TEMPLATE.format(date=format_expiry_date(expiry_date))


def generate_alert_body(expiry_date: date, vendors: List[VendorRecord]) -> str:
    """
    Generate the plain-text alert body for one expiry date.

    Each vendor/document pair gets one line, in first-seen order; repeated
    pairs (e.g. the same document listed under two email casings) are listed once.

    Args:
        expiry_date: Expiry date shared by all vendors in the group
        vendors: Records expiring on that date

    Returns:
        Body text ready to send via email
    """
    lines = [
        "Dear Vendor(s),",
        "",
        f"The following documents are set to expire on {format_expiry_date(expiry_date)}:",
        "",
    ]
    seen = set()
    for v in vendors:
        pair = (v.vendor_name, v.document_number)
        if pair in seen:
            continue
        seen.add(pair)
        lines.append(f"- {v.vendor_name}: Document {v.document_number}")
    lines.extend([
        "",
        "Please take the necessary actions.",
        "",
        "Regards,",
        "Vendor Management Team",
    ])
    return "\n".join(lines)

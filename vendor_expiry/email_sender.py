"""
Email Sender Module

This module sends plain-text emails with an optional single file attachment.
This is a pure infrastructure module - no email content generation logic.

Uses SMTP for email delivery with:
- One message per call, addressed to all recipients in a single To header
- A fixed sender address
- A fresh SMTP connection per call, closed when the send completes or fails
- Environment variable-based server configuration
"""

import os
import smtplib
from typing import List, Optional
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.mime.base import MIMEBase
from email import encoders

from vendor_expiry.config import SENDER_ADDRESS, get_smtp_settings
from vendor_expiry.exceptions import EmailConfigurationError
from vendor_expiry.logger import get_logger

logger = get_logger(__name__)


def build_message(
    to_emails: List[str],
    subject: str,
    body: str,
    attachment_path: Optional[str] = None
) -> MIMEMultipart:
    """
    Build the MIME message for send_email().

    Args:
        to_emails: Recipient email addresses, joined with ',' in the To header
        subject: Email subject line
        body: Plain-text email body
        attachment_path: Optional path of a file to attach

    Returns:
        multipart/mixed message with a text/plain body and the attachment, if any
    """
    message = MIMEMultipart('mixed')
    message['From'] = SENDER_ADDRESS
    message['To'] = ",".join(to_emails)
    message['Subject'] = subject
    message.attach(MIMEText(body, 'plain', 'utf-8'))

    if attachment_path:
        with open(attachment_path, 'rb') as f:
            attachment = MIMEBase('application', 'octet-stream')
            attachment.set_payload(f.read())

        encoders.encode_base64(attachment)
        filename = os.path.basename(attachment_path)
        attachment.add_header(
            'Content-Disposition',
            f'attachment; filename="{filename}"'
        )
        message.attach(attachment)
        logger.debug(f"Attached file: {filename}")

    return message


def send_email(
    to_emails: List[str],
    subject: str,
    body: str,
    attachment_path: Optional[str] = None
) -> None:
    """
    Send one plain-text email, optionally with a file attached.

    Args:
        to_emails: List of recipient email addresses
        subject: Email subject line
        body: Plain-text email body
        attachment_path: Optional path of a file to attach

    Raises:
        EmailConfigurationError: If the recipient list is empty or SMTP_SERVER is not set
        FileNotFoundError: If attachment_path does not point to a file
        smtplib.SMTPException, OSError: If the SMTP transport fails

    Environment Variables:
        - SMTP_SERVER: SMTP server address (required)
        - SMTP_PORT: SMTP port (optional, defaults to 587)
        - SMTP_USER / SMTP_PASSWORD: credentials (optional, login skipped when unset)
        - SMTP_USE_TLS: STARTTLS toggle (optional, defaults to true)

    Example:
        send_email(
            to_emails=["vendor@example.com"],
            subject="Vendor Expiry Report",
            body="Attached is the report.",
            attachment_path="reports/VendorReport_20240601120000.csv"
        )
    """
    if not to_emails:
        raise EmailConfigurationError("Email recipient list is empty")

    if attachment_path and not os.path.isfile(attachment_path):
        raise FileNotFoundError(f"Attachment file not found: {attachment_path}")

    settings = get_smtp_settings()
    if not settings["server"]:
        raise EmailConfigurationError("SMTP_SERVER environment variable is not set")

    logger.info(f"Sending email '{subject}' to {len(to_emails)} recipient(s)")
    message = build_message(to_emails, subject, body, attachment_path)

    with smtplib.SMTP(settings["server"], settings["port"]) as server:
        if settings["use_tls"]:
            server.starttls()
        if settings["user"] and settings["password"]:
            server.login(settings["user"], settings["password"])
        server.send_message(message, from_addr=SENDER_ADDRESS, to_addrs=to_emails)

    logger.debug(f"Email sent via {settings['server']}:{settings['port']}")

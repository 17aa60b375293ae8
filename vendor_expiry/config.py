"""
Configuration file for the vendor expiry email service.

Fixed values live here as module constants. The two business settings (the
vendor database connection string and the CSV output folder) and the SMTP
settings are read from environment variables through the accessor functions
below, at each call, so a changed .env or service environment takes effect
on the next daily run without a restart.

IMPORTANT: Sensitive values (database credentials, SMTP password) must only
be set in the environment or a .env file, never in this file.
"""

import os
from typing import Optional

# ============================================================================
# Environment Variable Names
# ============================================================================

# Connection string for the vendor database
# Expected format in .env: VENDOR_DB_CONNECTION_STRING=server=db;port=3306;database=vendors;uid=reader;pwd=secret
CONNECTION_STRING_ENV = "VENDOR_DB_CONNECTION_STRING"

# Output folder for generated CSV reports
# Expected format in .env: CSV_FOLDER=/var/lib/vendor-expiry/reports
CSV_FOLDER_ENV = "CSV_FOLDER"

# ============================================================================
# Scheduling Configuration
# ============================================================================

# Daily trigger time (local time, 24-hour format)
SCHEDULE_HOUR = 12
SCHEDULE_MINUTE = 0

# Seconds to wait for the loop thread to finish when the service stops
STOP_JOIN_TIMEOUT_SECONDS = 30

# ============================================================================
# Query Configuration
# ============================================================================

# Exact day offsets (expiry date minus today) that trigger an alert:
# expiring in 15 days, expired 15 days ago, expired 60 days ago.
# These are exact values, not a range.
ALERT_DAY_OFFSETS = (15, -15, -60)

# Vendors expiring more than this many days from today go into the CSV report
REPORT_MIN_DAYS_AHEAD = 20

# ============================================================================
# Email Configuration
# ============================================================================

# Fixed sender address for all outgoing mail
SENDER_ADDRESS = "jammyfaron@gmail.com"

# Alert subject template, {date} is the expiry date in ISO form (YYYY-MM-DD)
ALERT_SUBJECT_TEMPLATE = "Document Expiry Alert - {date}"

REPORT_EMAIL_SUBJECT = "Vendor Expiry Report"

REPORT_EMAIL_BODY = "Attached is the report for vendors with expiry > 20 days."

# Default SMTP port (used if SMTP_PORT environment variable is not set)
DEFAULT_SMTP_PORT = 587

# ============================================================================
# Report File Configuration
# ============================================================================

REPORT_FILENAME_PREFIX = "VendorReport_"

# Format: YYYYMMDDHHMMSS (e.g., "20240601120000")
REPORT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

REPORT_CSV_HEADER = "VendorName,DocumentNumber,ExpiryDate,Email"

# ============================================================================
# Logging Configuration
# ============================================================================

# Log file name, written next to the running program
LOG_FILENAME = "log.txt"


def _read_setting(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def get_connection_string() -> Optional[str]:
    """Return the vendor database connection string, or None if unset or blank."""
    return _read_setting(CONNECTION_STRING_ENV)


def get_csv_folder() -> Optional[str]:
    """Return the CSV output folder, or None if unset or blank."""
    return _read_setting(CSV_FOLDER_ENV)


def get_smtp_settings() -> dict:
    """
    Read SMTP settings from environment variables.

    Environment Variables:
        - SMTP_SERVER: SMTP server address (e.g., 'smtp.gmail.com')
        - SMTP_PORT: SMTP port (optional, defaults to 587)
        - SMTP_USER: SMTP username (optional)
        - SMTP_PASSWORD: SMTP password or app-specific password (optional)
        - SMTP_USE_TLS: Enable STARTTLS (optional, defaults to true)

    Returns:
        Dictionary with keys server, port, user, password, use_tls
    """
    port_str = _read_setting("SMTP_PORT")
    use_tls_str = (_read_setting("SMTP_USE_TLS") or "true").lower()
    return {
        "server": _read_setting("SMTP_SERVER"),
        "port": int(port_str) if port_str else DEFAULT_SMTP_PORT,
        "user": _read_setting("SMTP_USER"),
        "password": _read_setting("SMTP_PASSWORD"),
        "use_tls": use_tls_str in ("true", "1", "yes"),
    }

"""
CSV Report Pipeline

Writes every vendor expiring more than 20 days from today to a timestamped
CSV file and emails the file to the distinct vendor addresses in it:
1. Resolve the output folder (abort if not configured)
2. Fetch report rows from the vendor database
3. Write VendorReport_<YYYYMMDDHHMMSS>.csv
4. Email the file as an attachment
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from vendor_expiry.config import (
    REPORT_CSV_HEADER,
    REPORT_EMAIL_BODY,
    REPORT_EMAIL_SUBJECT,
    REPORT_FILENAME_PREFIX,
    REPORT_TIMESTAMP_FORMAT,
    get_csv_folder,
)
from vendor_expiry.email_body_generator import format_expiry_date
from vendor_expiry.email_sender import send_email
from vendor_expiry.logger import get_logger
from vendor_expiry.models import ServiceContext, VendorRecord
from vendor_expiry.vendor_repository import fetch_report_records

logger = get_logger(__name__)

REPORT_COLUMNS = ["vendor_name", "document_number", "expiry_date", "email"]


def build_report_filename(now: datetime) -> str:
    """
    Build the report file name.

    Example: "VendorReport_20240601120000.csv"
    """
    return f"{REPORT_FILENAME_PREFIX}{now.strftime(REPORT_TIMESTAMP_FORMAT)}.csv"


def records_to_dataframe(records: Iterable[VendorRecord]) -> pd.DataFrame:
    """Load report records into a DataFrame with one column per VendorRecord field."""
    return pd.DataFrame(
        [(r.vendor_name, r.document_number, r.expiry_date, r.email) for r in records],
        columns=REPORT_COLUMNS,
    )


def write_report_csv(report_df: pd.DataFrame, file_path: Path) -> None:
    """
    Write the report as a header line plus one comma-joined line per row.

    Fields are written as-is, without quoting; values are not expected to
    contain commas.
    """
    lines = [REPORT_CSV_HEADER]
    if not report_df.empty:
        formatted = report_df.assign(expiry_date=report_df["expiry_date"].map(format_expiry_date))
        lines.extend(formatted[REPORT_COLUMNS].astype(str).agg(",".join, axis=1))

    with open(file_path, "w", encoding="utf-8", newline="") as f:
        f.write("\n".join(lines) + "\n")


def collect_report_recipients(report_df: pd.DataFrame) -> List[str]:
    """Return the distinct non-blank emails in the report, in first-seen order."""
    emails = report_df["email"]
    emails = emails[emails.str.strip() != ""]
    return emails.drop_duplicates().tolist()


def generate_and_send_report(
    context: ServiceContext,
    now: Optional[datetime] = None
) -> Optional[Path]:
    """
    Run the CSV report pipeline once.

    Args:
        context: Service context; a stop request after the file is written skips the email
        now: Timestamp for the file name and the query date (defaults to now)

    Returns:
        Path of the written CSV file, or None if the output folder or the
        database is not configured

    Raises:
        Exception: Database, filesystem and email errors propagate unchanged
    """
    folder = get_csv_folder()
    if not folder:
        logger.error("Error: CSV output folder setting is missing.")
        return None

    now = now or datetime.now()

    records = fetch_report_records(now.date())
    if records is None:
        return None

    output_dir = Path(folder)
    output_dir.mkdir(parents=True, exist_ok=True)
    file_path = output_dir / build_report_filename(now)

    report_df = records_to_dataframe(records)
    write_report_csv(report_df, file_path)
    logger.info(f"CSV report written: {file_path} ({len(report_df)} row(s))")

    recipients = collect_report_recipients(report_df)
    if not recipients:
        logger.warning("No recipient emails found in report rows. Skipping report email.")
        return file_path

    if context.stop_requested:
        logger.info("Stop requested. Skipping report email.")
        return file_path

    send_email(
        to_emails=recipients,
        subject=REPORT_EMAIL_SUBJECT,
        body=REPORT_EMAIL_BODY,
        attachment_path=str(file_path),
    )
    logger.info("CSV report sent.")
    return file_path

"""
Data types shared by the pipelines and the scheduler loop.
"""

import threading
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List

from vendor_expiry.logger import default_log_path

# Written in place of a missing expiry date in the CSV report
MISSING_EXPIRY_DATE = date.min


@dataclass(frozen=True)
class VendorRecord:
    """One row of the vendor table."""

    vendor_name: str
    document_number: str
    expiry_date: date
    email: str


# Expiry date -> records sharing that date, in first-seen order
ExpiryGroups = Dict[date, List[VendorRecord]]


@dataclass
class ServiceContext:
    """
    Long-lived state shared by the scheduler loop and the pipelines.

    Attributes:
        stop_event: Set by the stop handler to cancel the wait for the next run
        log_path: Append-only log file for the service
    """

    stop_event: threading.Event = field(default_factory=threading.Event)
    log_path: Path = field(default_factory=default_log_path)

    @property
    def stop_requested(self) -> bool:
        return self.stop_event.is_set()

#!/usr/bin/env python3
"""
Service Runner Script for the Vendor Expiry Email Service

Starts the daily scheduler loop and keeps the process alive until it receives
SIGINT or SIGTERM. Run it under a process supervisor (systemd, supervisord,
a Windows service wrapper, ...) so it restarts with the machine.

SYSTEMD EXAMPLE:
----------------
[Service]
WorkingDirectory=/path/to/project
ExecStart=/usr/bin/python3 /path/to/project/scripts/run_vendor_expiry_service.py
Restart=on-failure

ENVIRONMENT VARIABLES:
----------------------
Variables are loaded from a .env file in the working directory if present,
without overriding values already set in the environment.

REQUIRED ENVIRONMENT VARIABLES:
- VENDOR_DB_CONNECTION_STRING
- CSV_FOLDER
- SMTP_SERVER
- SMTP_PORT (optional, default: 587)
- SMTP_USER / SMTP_PASSWORD (optional)
- SMTP_USE_TLS (optional, default: true)

LOGGING:
--------
- Application log: scripts/log.txt (next to this script)
"""

import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vendor_expiry.config import LOG_FILENAME
from vendor_expiry.models import ServiceContext
from vendor_expiry.scheduler import VendorExpiryService


def main():
    """
    Main entry point.

    This function:
    1. Loads environment variables from .env
    2. Starts the scheduler loop in the background
    3. Stops it cleanly on SIGINT/SIGTERM
    """
    load_dotenv()

    service = VendorExpiryService(ServiceContext(log_path=Path(__file__).resolve().parent / LOG_FILENAME))

    def _handle_stop(signum, _frame):
        service.stop()

    signal.signal(signal.SIGINT, _handle_stop)
    signal.signal(signal.SIGTERM, _handle_stop)

    service.start()
    service.wait()
    sys.exit(0)


if __name__ == "__main__":
    main()

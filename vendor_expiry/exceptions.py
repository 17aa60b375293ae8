"""Exception types raised by the vendor expiry service."""


class VendorExpiryError(Exception):
    """Base class for errors raised by this package."""


class EmailConfigurationError(VendorExpiryError):
    """Raised when an email cannot be built or sent because of missing settings."""


class AlertDeliveryError(VendorExpiryError):
    """Raised after an alert run in which one or more expiry groups failed to send."""

    def __init__(self, failed_dates):
        self.failed_dates = list(failed_dates)
        dates = ", ".join(d.isoformat() for d in self.failed_dates)
        super().__init__(f"Failed to send expiry alerts for: {dates}")

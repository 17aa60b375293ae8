"""
Vendor Expiry Email Service

This package runs a daily background job that emails document expiry alerts
to vendors and sends a CSV report of longer-dated expiries to stakeholders.
"""

__version__ = "1.0.0"

"""
Daily Task Orchestrator

Runs the two daily pipelines in order:
1. Expiry alert emails
2. CSV report email

Each pipeline is wrapped on its own: an error in one is logged and does not
stop the other. This is pure orchestration/glue code - no business logic.
"""

from vendor_expiry.csv_report import generate_and_send_report
from vendor_expiry.expiry_alerts import send_expiry_alerts
from vendor_expiry.logger import get_logger
from vendor_expiry.models import ServiceContext

logger = get_logger(__name__)


def run_daily_tasks(context: ServiceContext) -> bool:
    """
    Run the expiry alert pipeline and then the CSV report pipeline.

    Args:
        context: Service context shared with the scheduler loop

    Returns:
        True if both pipelines completed without raising, False otherwise
    """
    tasks = [
        ("expiry alerts", send_expiry_alerts),
        ("CSV report", generate_and_send_report),
    ]

    success = True
    for task_name, task in tasks:
        if context.stop_requested:
            logger.info(f"Stop requested. Skipping {task_name}.")
            return False

        try:
            task(context)
        except Exception as e:
            logger.error(f"Error during {task_name}: {str(e)}", exc_info=True)
            success = False

    if success:
        logger.info("Daily tasks completed.")
    return success

"""One-shot accrual worker.

Runs the monthly accrual once for every tenant and exits. Periodicity belongs
to the scheduler that invokes it (cron, a Kubernetes CronJob, ...).
"""

from __future__ import annotations

import asyncio
import logging
import sys

from hrleave.config import get_settings
from hrleave.db import dispose_engine, get_session_factory

logger = logging.getLogger(__name__)


async def run_accrual_once() -> int:
    """Run the sweep and return the number of tenants that failed."""
    from hrleave.services.accrual import run_accrual_for_all_tenants

    logger.info("Accrual worker started")
    try:
        batch = await run_accrual_for_all_tenants(get_session_factory())
    finally:
        await dispose_engine()

    for run in batch.runs:
        logger.info(
            "Tenant %s: employees=%d types=%d updated=%d total=%s",
            run.tenant_id,
            run.employees,
            run.leave_types,
            run.updated,
            run.total_accrued,
        )
    if batch.errors:
        logger.error("Accrual failed for %d tenants: %s", batch.errors, ", ".join(batch.failed_tenants))
    return batch.errors


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    errors = asyncio.run(run_accrual_once())
    sys.exit(1 if errors else 0)


if __name__ == "__main__":
    main()

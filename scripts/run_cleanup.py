#!/usr/bin/env python
"""
Periodic cleanup of orphaned staged uploads.

Staged multipart files are removed by the request that created them; files
left behind by a crashed or killed process are purged here once they are older
than STAGING_MAX_AGE_MINUTES. Run as a cron job or separate process.
"""
import logging

from photo_api.app.core.config import get_settings
from photo_api.app.services import staging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cleanup")


def run_cleanup():
    """Run cleanup tasks."""
    settings = get_settings()
    try:
        removed = staging.purge_stale(settings.upload_staging_dir, settings.staging_max_age_minutes)
        if removed:
            logger.info("Removed %s stale staged uploads", removed)
    except OSError:
        logger.exception("Cleanup failed")


if __name__ == "__main__":
    run_cleanup()

# src/habithub/scheduler.py
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from habithub import config, db, weeks

logger = logging.getLogger(__name__)

NEW_WEEK_JOB_ID = "new_week"


def new_week_task(store=None):
    """Open the tracking period for the week that just started.

    Failures are logged and left for the next tick or the next request that
    needs the current week.
    """
    try:
        week = weeks.ensure_current_week(store or db.get_store())
        logger.info("Weekly job: current week is %s", week.week_id)
        return week
    except Exception:
        logger.exception("Weekly job failed to create the new week")
        return None


def create_scheduler(store=None) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=config.TIMEZONE)
    scheduler.add_job(
        new_week_task,
        "cron",
        kwargs={"store": store},
        id=NEW_WEEK_JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=3600,
        **config.NEW_WEEK_CRON,
    )
    return scheduler

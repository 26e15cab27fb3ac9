import logging

from apscheduler.triggers.cron import CronTrigger

from habithub import scheduler, weeks


def test_weekly_job_is_registered():
    sched = scheduler.create_scheduler()
    job = sched.get_job(scheduler.NEW_WEEK_JOB_ID)

    assert job is not None
    assert isinstance(job.trigger, CronTrigger)
    fields = {f.name: str(f) for f in job.trigger.fields}
    assert fields["day_of_week"] == "sun"
    assert fields["hour"] == "0"
    assert fields["minute"] == "5"


def test_weekly_job_creates_week(store, freeze_today):
    week = scheduler.new_week_task(store)
    assert week.week_id == "2026-W43"
    assert weeks.get_current_week(store).week_id == "2026-W43"


def test_weekly_job_survives_storage_errors(store, freeze_today, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise ConnectionError("database down")

    monkeypatch.setattr(store, "get_week", broken)

    with caplog.at_level(logging.ERROR, logger="habithub.scheduler"):
        assert scheduler.new_week_task(store) is None
    assert "failed to create the new week" in caplog.text

# libris/tasks/scheduler.py
from __future__ import annotations

import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Starts the overdue-reminder job when SCHEDULER_ENABLED is set.
    - Each run gets its own app context.
    - Under the debug reloader only the serving process starts it.
    """
    if not app.config.get("SCHEDULER_ENABLED"):
        app.logger.info("[scheduler] Disabled by config.")
        return None

    # the reloader's parent process has WERKZEUG_RUN_MAIN unset
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from libris.tasks.overdue_check import run_overdue_check_job

    scheduler = BackgroundScheduler(timezone="UTC")
    minutes = app.config["OVERDUE_CHECK_MINUTES"]

    scheduler.add_job(
        func=run_overdue_check_job,
        args=[app],
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_check_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120
    )

    scheduler.start()
    app.logger.info(f"[scheduler] Overdue check job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    return scheduler

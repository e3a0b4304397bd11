# FILE: ecopilot-backend/tasks.py

import logging
import jobs
from celery.signals import worker_process_init
from celery_worker import celery_app, settings
from dependencies import build_services
from exceptions import ConfigurationError
from logging_config import setup_logging
from timezone_utils import get_current_utc_date

# --- SETUP & CONFIG ---
setup_logging(settings.log_file_path, settings.log_level)

# --- WORKER SERVICES ---
# Built once per worker process, after the fork. gRPC channels must not cross a fork.
_services = None

@worker_process_init.connect
def init_worker_services(**kwargs):
    global _services
    _services = build_services(settings)
    logging.info("Worker process services ready.")


def get_services():
    if _services is None:
        raise ConfigurationError("Services are not initialized; tasks must run inside a Celery worker process.")
    return _services


def _summarize(outcomes):
    return {
        "recipients": len(outcomes),
        "persisted": sum(1 for o in outcomes if o.persisted),
        "pushed": sum(1 for o in outcomes if o.pushed),
    }


# --- DAILY CONTENT ---
@celery_app.task(name="generate_daily_challenges_task")
def generate_daily_challenges_task():
    selection = jobs.store_daily_challenges(get_services(), get_current_utc_date())
    return {"date": selection.date, "challenges": [e.id for e in selection.entries]}

@celery_app.task(name="generate_daily_tip_task")
def generate_daily_tip_task():
    results = jobs.store_daily_tips(get_services(), get_current_utc_date())
    return {"date": results[0].date, "tip": results[0].entries[0].id}


# --- SCHEDULED NOTIFICATIONS ---
@celery_app.task(name="daily_challenge_reminder_task")
def daily_challenge_reminder_task():
    return _summarize(jobs.send_daily_challenge_reminders(get_services()))

@celery_app.task(name="eco_tip_of_the_day_task")
def eco_tip_of_the_day_task():
    return _summarize(jobs.send_daily_eco_tip(get_services(), get_current_utc_date()))

@celery_app.task(name="re_engagement_task")
def re_engagement_task():
    return _summarize(jobs.send_re_engagement(get_services(), get_current_utc_date()))

@celery_app.task(name="streak_reminders_task")
def streak_reminders_task():
    summary = _summarize(jobs.send_streak_reminders(get_services(), get_current_utc_date()))
    logging.info(f"Streak reminder run finished: {summary}")
    return summary

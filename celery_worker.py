from celery import Celery
from celery.schedules import crontab
from config import Settings
from timezone_utils import get_current_local_datetime

# --- CELERY WORKER INITIALIZATION ---
# Run with: celery -A celery_worker.celery_app worker --beat

# 1. Load settings (honors a local .env). This MUST happen before anything else.
settings = Settings.from_env()


def _now_in_reminder_timezone():
    """Clock for the beat entries that fire on local reminder time instead of UTC."""
    return get_current_local_datetime(settings.reminder_timezone)


# 2. Create the Celery app instance.
celery_app = Celery('tasks',
                    broker=settings.celery_broker_url,
                    include=['tasks']) # This tells Celery to look for tasks in tasks.py

celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    enable_utc=True,
)

# 3. Periodic jobs. Daily content is keyed by the UTC date.
celery_app.conf.beat_schedule = {
    'generate-daily-challenges': {
        'task': 'generate_daily_challenges_task',
        'schedule': crontab(hour=0, minute=0),
    },
    'generate-daily-tip': {
        'task': 'generate_daily_tip_task',
        'schedule': crontab(hour=0, minute=0),
    },
    'daily-challenge-reminder': {
        'task': 'daily_challenge_reminder_task',
        'schedule': crontab(hour=8, minute=0, nowfun=_now_in_reminder_timezone),
    },
    'eco-tip-of-the-day': {
        'task': 'eco_tip_of_the_day_task',
        'schedule': crontab(hour=12, minute=0, nowfun=_now_in_reminder_timezone),
    },
    're-engagement': {
        'task': 're_engagement_task',
        'schedule': crontab(hour=10, minute=0),
    },
    'streak-reminders': {
        'task': 'streak_reminders_task',
        'schedule': crontab(hour=21, minute=0),
    },
}

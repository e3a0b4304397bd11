"""
Environment-driven settings for every EcoPilot process (Flask, Celery, Cloud Functions).
Values are loaded from the environment, with a local .env file honored via python-dotenv.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    log_file_path: str = "/tmp/ecopilot_app.log"
    log_level: str = "INFO"
    celery_broker_url: str = "redis://localhost:6379/0"
    ratelimit_storage_uri: str = "memory://"
    fanout_max_workers: int = Field(default=16, ge=1)
    reminder_timezone: str = "America/New_York"
    inactivity_days: int = Field(default=3, ge=1)
    push_channel_id: str = "ecopilot_dynamic"
    streak_channel_id: str = "ecopilot_streak_reminders"
    notification_color: str = "#4CAF50"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        env_map = {
            "log_file_path": "LOG_FILE_PATH",
            "log_level": "LOG_LEVEL",
            "celery_broker_url": "CELERY_BROKER_URL",
            "ratelimit_storage_uri": "RATELIMIT_STORAGE_URI",
            "fanout_max_workers": "FANOUT_MAX_WORKERS",
            "reminder_timezone": "REMINDER_TIMEZONE",
            "inactivity_days": "INACTIVITY_DAYS",
            "push_channel_id": "PUSH_CHANNEL_ID",
            "streak_channel_id": "STREAK_CHANNEL_ID",
            "notification_color": "NOTIFICATION_COLOR",
        }
        values = {field: os.environ[var] for field, var in env_map.items() if os.environ.get(var)}
        return cls.model_validate(values)

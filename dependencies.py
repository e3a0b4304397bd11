"""
Dependency container for the EcoPilot backend.
`build_services()` is called exactly once per process (Flask app factory,
Celery worker start, Cloud Function cold start) and the resulting `Services`
object is passed to every job and trigger handler.
"""

import logging
from typing import Optional

from flask import current_app
from google.cloud import firestore

from config import Settings
from delivery import DeliveryOrchestrator, PushClient
from firebase_init import initialize_firebase

EXTENSION_KEY = "ecopilot_services"


class Services:
    def __init__(self, settings: Settings, db, delivery: DeliveryOrchestrator):
        self.settings = settings
        self.db = db
        self.delivery = delivery

    def __repr__(self):
        return f"<Services db={type(self.db).__name__} workers={self.delivery.max_workers}>"


def build_services(settings: Optional[Settings] = None) -> Services:
    """Creates the Firebase app, Firestore client and delivery orchestrator."""
    settings = settings or Settings.from_env()
    firebase_app = initialize_firebase()

    # --- Google Cloud Clients ---
    db = firestore.Client()
    push_client = PushClient(
        app=firebase_app,
        channel_id=settings.push_channel_id,
        streak_channel_id=settings.streak_channel_id,
        color=settings.notification_color,
    )
    delivery = DeliveryOrchestrator(db, push_client, max_workers=settings.fanout_max_workers)
    logging.info("EcoPilot services initialized.")
    return Services(settings, db, delivery)


def get_current_services() -> Services:
    """The Services instance attached to the running Flask app."""
    return current_app.extensions[EXTENSION_KEY]

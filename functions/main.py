import os
import sys
import logging
from firebase_functions import firestore_fn, options

# --- SETUP & CONFIG ---
# This allows the functions to find the shared backend modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from config import Settings
from dependencies import build_services
from logging_config import setup_logging
import triggers

settings = Settings.from_env()
setup_logging(settings.log_file_path, settings.log_level)

# Built once per instance, at cold start.
services = build_services(settings)


def _snapshot_dict(snapshot):
    return snapshot.to_dict() if snapshot is not None and snapshot.exists else None


@firestore_fn.on_document_updated(document="users/{userId}", memory=options.MemoryOption.MB_256)
def on_user_updated(event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot]]) -> None:
    """Streak milestone, points milestone and rank-up notifications."""
    user_id = event.params["userId"]
    before = _snapshot_dict(event.data.before)
    after = _snapshot_dict(event.data.after)
    triggers.handle_user_updated(services, user_id, before, after)


@firestore_fn.on_document_created(document="users/{userId}/scannedProducts/{productId}", memory=options.MemoryOption.MB_256)
def on_product_scanned(event: firestore_fn.Event[firestore_fn.DocumentSnapshot]) -> None:
    """Scan insight for a newly scanned product."""
    user_id = event.params["userId"]
    product_id = event.params["productId"]
    outcome = triggers.handle_product_scanned(services, user_id, product_id, _snapshot_dict(event.data))
    if outcome is None:
        logging.info(f"No scan insight sent for {user_id}/{product_id}.")


@firestore_fn.on_document_updated(document="user_challenges/{userChallengeId}")
def on_user_challenge_updated(event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot]]) -> None:
    """Credits the user's streak when all of the day's challenges become completed."""
    doc_id = event.params["userChallengeId"]
    triggers.handle_user_challenge_updated(
        services, doc_id, _snapshot_dict(event.data.before), _snapshot_dict(event.data.after)
    )

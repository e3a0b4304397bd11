"""
Handlers for Firestore document-change events.

The handlers receive plain before/after dicts so they can be driven by the
Cloud Functions entry points, the replay endpoint and tests alike.
"""

import logging
import re
from typing import List, Optional, Tuple

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

import notification_builder
from dependencies import Services
from exceptions import MalformedInputError, PersistenceError
from milestones import POINTS_MILESTONES, STREAK_MILESTONES, detect_rank_change, detect_transition
from models import DeliveryOutcome, Metric, NotificationContent, ScannedProduct, UserMetricTransition

USER_CHALLENGE_ID_PATTERN = re.compile(r"^(?P<user_id>.+)-(?P<date>\d{4}-\d{2}-\d{2})$")


# --- USER DOCUMENT UPDATES ---
def _streak_event(user_id, before, after) -> Optional[NotificationContent]:
    transition = UserMetricTransition.from_snapshots(user_id, Metric.STREAK, before, after)
    milestone = detect_transition(transition, STREAK_MILESTONES)
    if milestone is None:
        return None
    return notification_builder.build_streak_milestone(milestone)


def _points_event(user_id, before, after) -> Optional[NotificationContent]:
    transition = UserMetricTransition.from_snapshots(user_id, Metric.POINTS, before, after)
    milestone = detect_transition(transition, POINTS_MILESTONES)
    if milestone is None:
        return None
    return notification_builder.build_points_milestone(milestone, transition.after)


def _rank_event(user_id, before, after) -> Optional[NotificationContent]:
    transition = UserMetricTransition.from_snapshots(user_id, Metric.RANK, before, after)
    change = detect_rank_change(transition)
    if change is None:
        return None
    return notification_builder.build_rank_up(*change)


USER_EVENT_DETECTORS = (
    (Metric.STREAK, _streak_event),
    (Metric.POINTS, _points_event),
    (Metric.RANK, _rank_event),
)


def detect_user_events(user_id: str, before: Optional[dict], after: Optional[dict]) -> List[NotificationContent]:
    """
    Runs the streak, points and rank detectors on one user update.

    Each detector fails closed on its own field: a malformed streak never
    suppresses a valid points milestone.
    """
    events = []
    for metric, detector in USER_EVENT_DETECTORS:
        try:
            content = detector(user_id, before, after)
        except MalformedInputError as e:
            logging.warning(f"Skipping {metric.value} detection for user {user_id}: {e}")
            continue
        if content is not None:
            events.append(content)
    return events


def handle_user_updated(services: Services, user_id: str, before: Optional[dict], after: Optional[dict]) -> List[DeliveryOutcome]:
    """
    Detects and delivers milestone and rank notifications for one user update.

    Raises:
        PersistenceError: if any notification could not be stored, after all
            events have been attempted.
    """
    token = (after or {}).get('fcmToken')
    outcomes, failure = [], None
    for content in detect_user_events(user_id, before, after):
        try:
            outcomes.append(services.delivery.deliver(user_id, content, token))
        except PersistenceError as e:
            failure = failure or e
    if failure:
        raise failure
    if outcomes:
        logging.info(f"🎉 Delivered {len(outcomes)} notification(s) for user {user_id}")
    return outcomes


# --- SCANNED PRODUCTS ---
def handle_product_scanned(services: Services, user_id: str, product_id: str, product: Optional[dict]) -> Optional[DeliveryOutcome]:
    try:
        scanned = ScannedProduct.from_document(product_id, product)
    except MalformedInputError as e:
        logging.warning(f"No scan insight for user {user_id}: {e}")
        return None

    content = notification_builder.build_scan_insight(scanned.productName, scanned.ecoScore, product_id)
    user_doc = services.db.collection('users').document(user_id).get()
    token = (user_doc.to_dict() or {}).get('fcmToken') if user_doc.exists else None
    return services.delivery.deliver(user_id, content, token)


# --- DAILY CHALLENGE COMPLETION ---
def parse_user_challenge_id(doc_id: str) -> Tuple[str, str]:
    """Splits '<userId>-<YYYY-MM-DD>' into (user_id, date)."""
    match = USER_CHALLENGE_ID_PATTERN.match(doc_id or "")
    if not match:
        raise MalformedInputError(f"User challenge id '{doc_id}' is not '<userId>-<YYYY-MM-DD>'.")
    return match.group('user_id'), match.group('date')


def _all_completed(data: Optional[dict]) -> bool:
    completed = (data or {}).get('completed')
    return isinstance(completed, list) and all(bool(c) for c in completed)


def handle_user_challenge_updated(services: Services, doc_id: str, before: Optional[dict], after: Optional[dict]) -> bool:
    """
    Extends the user's streak when today's challenges flip to all completed.

    Returns True when the streak was incremented.
    """
    if _all_completed(before) or not _all_completed(after):
        return False

    try:
        user_id, day = parse_user_challenge_id(doc_id)
    except MalformedInputError as e:
        logging.warning(str(e))
        return False

    try:
        services.db.collection('users').document(user_id).update({
            'streak': firestore.Increment(1),
            'lastChallengeDate': day,
        })
    except gcp_exceptions.NotFound:
        logging.warning(f"Challenges completed for unknown user {user_id}, streak not updated.")
        return False
    logging.info(f"✅ Updated streak for user {user_id} after completing challenges for {day}")
    return True

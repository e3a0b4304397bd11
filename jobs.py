"""
Scheduled jobs. Each job takes the process `Services` and the date it runs
for, so a manual replay for a given date does exactly what the scheduler
would have done.
"""

import datetime
import logging
from typing import Dict, List, Optional, Tuple

from google.cloud import firestore

import daily_selector
import notification_builder
from dependencies import Services
from exceptions import MalformedInputError
from models import DeliveryOutcome, Recipient, SelectionResult, UserRecord
from timezone_utils import date_range, days_before_string, to_date_string


# --- DAILY CONTENT ---
def store_daily_challenges(services: Services, day: datetime.date) -> SelectionResult:
    """Computes the challenges for `day` and writes challenges/{YYYY-MM-DD}."""
    selection = daily_selector.generate_daily_challenges(day)
    services.db.collection('challenges').document(selection.date).set(selection.to_challenges_document())
    logging.info(f"✅ Successfully created challenges for {selection.date}: {[e.id for e in selection.entries]}")
    return selection


def store_daily_tips(services: Services, start: datetime.date, days: int = 1) -> List[SelectionResult]:
    """Writes daily_tips/{YYYY-MM-DD} for `days` consecutive dates beginning at `start`."""
    if days < 1:
        raise MalformedInputError(f"Number of days must be at least 1, got {days}.")
    results = []
    for day in date_range(start, days):
        selection = daily_selector.generate_daily_tip(day)
        services.db.collection('daily_tips').document(selection.date).set(selection.to_tip_document(), merge=True)
        logging.info(f"✅ Generated daily tip for {selection.date}: {selection.entries[0].id}")
        results.append(selection)
    return results


# --- USER LOOKUPS ---
def load_user(services: Services, user_id: str) -> Optional[UserRecord]:
    user_doc = services.db.collection('users').document(user_id).get()
    if not user_doc.exists:
        return None
    return UserRecord.from_document(user_id, user_doc.to_dict())


def users_with_tokens(services: Services) -> Dict[str, UserRecord]:
    """All users with an FCM token, keyed by user id. Unreadable documents are skipped."""
    query = services.db.collection('users').where(filter=firestore.FieldFilter('fcmToken', '!=', None))
    users = {}
    for user_doc in query.stream():
        try:
            users[user_doc.id] = UserRecord.from_document(user_doc.id, user_doc.to_dict())
        except MalformedInputError as e:
            logging.warning(f"Skipping user {user_doc.id}: {e}")
    return users


def _recipients(users: Dict[str, UserRecord]) -> Tuple[Recipient, ...]:
    return tuple(Recipient(userId=u.userId, fcmToken=u.fcmToken) for u in users.values())


def has_completed_challenges(services: Services, user_id: str, day: datetime.date) -> bool:
    """True when every challenge in user_challenges/{userId}-{date} is marked completed."""
    doc = services.db.collection('user_challenges').document(f"{user_id}-{to_date_string(day)}").get()
    if not doc.exists:
        return False
    completed = (doc.to_dict() or {}).get('completed') or []
    return isinstance(completed, list) and all(c is True for c in completed)


# --- BROADCAST-STYLE JOBS ---
def send_daily_challenge_reminders(services: Services) -> Tuple[DeliveryOutcome, ...]:
    logging.info("⏰ Sending daily challenge reminders...")
    users = users_with_tokens(services)
    content = notification_builder.build_daily_challenge_reminder()
    outcomes = services.delivery.fan_out(_recipients(users), lambda recipient: content)
    logging.info(f"✅ Sent daily challenge reminders to {len(users)} users")
    return outcomes


def send_daily_eco_tip(services: Services, day: datetime.date) -> Tuple[DeliveryOutcome, ...]:
    logging.info("💡 Sending daily eco tips...")
    users = users_with_tokens(services)
    content = notification_builder.build_eco_tip(daily_selector.tip_of_the_day(day))
    outcomes = services.delivery.fan_out(_recipients(users), lambda recipient: content)
    logging.info(f"✅ Sent eco tips to {len(users)} users")
    return outcomes


def send_broadcast(services: Services, title: str, body: str, category: Optional[str] = None) -> Tuple[DeliveryOutcome, ...]:
    users = users_with_tokens(services)
    content = notification_builder.build_broadcast(title, body, category)
    outcomes = services.delivery.fan_out(_recipients(users), lambda recipient: content)
    logging.info(f"Broadcast '{title}' sent to {len(users)} users")
    return outcomes


# --- STREAK JOBS ---
def send_streak_reminders(services: Services, day: datetime.date) -> Tuple[DeliveryOutcome, ...]:
    """Warns users with an active streak who have not finished the day's challenges."""
    logging.info("🔔 Starting streak reminder check...")
    users = users_with_tokens(services)
    if not users:
        logging.info("No users with FCM tokens found")
        return ()

    def build(recipient):
        user = users[recipient.userId]
        if user.streak <= 0 or has_completed_challenges(services, user.userId, day):
            return None
        return notification_builder.build_streak_warning(user.streak)

    outcomes = services.delivery.fan_out(_recipients(users), build)
    logging.info(f"🔔 Sent {sum(1 for o in outcomes if o.pushed)} streak reminder(s)")
    return outcomes


def is_inactive(user: UserRecord, day: datetime.date, inactivity_days: int) -> bool:
    return not user.lastChallengeDate or user.lastChallengeDate < days_before_string(day, inactivity_days)


def send_re_engagement(services: Services, day: datetime.date) -> Tuple[DeliveryOutcome, ...]:
    """Nudges users who have not completed a challenge in the configured number of days."""
    logging.info("🔄 Starting re-engagement check...")
    users = users_with_tokens(services)
    inactivity_days = services.settings.inactivity_days

    def build(recipient):
        user = users[recipient.userId]
        if not is_inactive(user, day, inactivity_days):
            return None
        return notification_builder.build_re_engagement(user.streak)

    outcomes = services.delivery.fan_out(_recipients(users), build)
    logging.info(f"🔄 Sent {sum(1 for o in outcomes if o.pushed)} re-engagement notification(s)")
    return outcomes


def check_user_streak(services: Services, user: UserRecord, day: datetime.date) -> dict:
    """Sends one user a streak warning unless they already finished the day's challenges."""
    completed = has_completed_challenges(services, user.userId, day)
    if completed:
        return {"message": "Challenge already completed today", "streak": user.streak, "completedToday": True}

    outcome = services.delivery.deliver(
        user.userId, notification_builder.build_streak_warning(user.streak), user.fcmToken
    )
    return {
        "message": "Streak warning sent" if outcome.pushed else "Streak warning stored, push not delivered",
        "streak": user.streak,
        "completedToday": False,
        "pushed": outcome.pushed,
        "reason": outcome.reason,
    }

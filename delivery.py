"""
Delivery boundary: stores notification records in Firestore and pushes them
through Firebase Cloud Messaging.

Persistence failures are errors; push failures are logged and reported as a
reason code but never raised.
"""

import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional, Tuple

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from exceptions import PersistenceError
from models import DeliveryOutcome, NotificationContent, NotificationRecord, PushResult, Recipient
from notification_builder import CATEGORY_RE_ENGAGEMENT, CATEGORY_STREAK_REMINDER
from timezone_utils import get_current_utc_datetime

# --- PUSH FAILURE REASON CODES ---
REASON_NO_TOKEN = "no-recipient-address"
REASON_UNREGISTERED = "recipient-unregistered"
REASON_INVALID_RECIPIENT = "invalid-recipient"
REASON_DELIVERY_FAILED = "delivery-failed"
REASON_PERSISTENCE_FAILED = "persistence-failed"
REASON_BUILD_FAILED = "build-failed"

STREAK_CATEGORIES = {CATEGORY_STREAK_REMINDER, CATEGORY_RE_ENGAGEMENT}


class PushClient:
    """Thin wrapper around firebase_admin.messaging bound to one Firebase app."""

    def __init__(self, app=None, channel_id="ecopilot_dynamic", streak_channel_id="ecopilot_streak_reminders",
                 color="#4CAF50"):
        self.app = app
        self.channel_id = channel_id
        self.streak_channel_id = streak_channel_id
        self.color = color

    def build_message(self, token: str, content: NotificationContent) -> messaging.Message:
        data = dict(content.data)
        data['category'] = content.category
        channel_id = self.streak_channel_id if content.category in STREAK_CATEGORIES else self.channel_id
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=content.title, body=content.body),
            data=data,
            android=messaging.AndroidConfig(
                priority='high',
                notification=messaging.AndroidNotification(channel_id=channel_id, color=self.color, sound='default'),
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(aps=messaging.Aps(sound='default', badge=1)),
            ),
        )

    def send(self, token: str, content: NotificationContent) -> str:
        return messaging.send(self.build_message(token, content), app=self.app)


class DeliveryOrchestrator:
    def __init__(self, db, push_client: PushClient, max_workers: int = 16,
                 clock: Callable[[], datetime.datetime] = get_current_utc_datetime):
        self.db = db
        self.push_client = push_client
        self.max_workers = max_workers
        self.clock = clock

    def persist(self, record: NotificationRecord) -> str:
        """Adds the record to the notifications collection and returns its document id."""
        try:
            _, doc_ref = self.db.collection('notifications').add(record.to_document())
        except Exception as e:
            logging.error(f"Failed to store notification for user {record.userId}: {e}", exc_info=True)
            raise PersistenceError(record.userId, f"Could not store notification: {e}") from e
        return doc_ref.id

    def push(self, user_id: str, token: Optional[str], content: NotificationContent) -> PushResult:
        """One send attempt. Never raises."""
        if not token:
            logging.info(f"User {user_id} does not have an FCM token. Skipping push.")
            return PushResult(sent=False, reason=REASON_NO_TOKEN)
        try:
            message_id = self.push_client.send(token, content)
            logging.info(f"✅ Push '{content.category}' sent to user {user_id}. Response: {message_id}")
            return PushResult(sent=True, messageId=message_id)
        except messaging.UnregisteredError as e:
            logging.warning(f"FCM token for user {user_id} is no longer registered, it should be removed: {e}")
            return PushResult(sent=False, reason=REASON_UNREGISTERED)
        except (firebase_exceptions.InvalidArgumentError, messaging.SenderIdMismatchError, ValueError) as e:
            logging.warning(f"Invalid FCM token for user {user_id}: {e}")
            return PushResult(sent=False, reason=REASON_INVALID_RECIPIENT)
        except Exception as e:
            logging.error(f"❌ Failed to push notification to user {user_id}: {e}", exc_info=True)
            return PushResult(sent=False, reason=REASON_DELIVERY_FAILED)

    def deliver(self, user_id: str, content: NotificationContent, token: Optional[str] = None) -> DeliveryOutcome:
        """
        Stores the notification, then pushes it when the user has a token.

        Raises:
            PersistenceError: if the record could not be stored. Nothing is pushed then.
        """
        record = NotificationRecord.from_content(user_id, content, self.clock())
        self.persist(record)
        result = self.push(user_id, token, content)
        return DeliveryOutcome(userId=user_id, persisted=True, pushed=result.sent, reason=result.reason)

    def _deliver_isolated(self, recipient: Recipient,
                          build: Callable[[Recipient], Optional[NotificationContent]]) -> Optional[DeliveryOutcome]:
        try:
            content = build(recipient)
        except Exception as e:
            logging.error(f"Failed to build notification for user {recipient.userId}: {e}", exc_info=True)
            return DeliveryOutcome(userId=recipient.userId, persisted=False, reason=REASON_BUILD_FAILED)
        if content is None:
            return None
        try:
            return self.deliver(recipient.userId, content, recipient.fcmToken)
        except PersistenceError:
            return DeliveryOutcome(userId=recipient.userId, persisted=False, reason=REASON_PERSISTENCE_FAILED)
        except Exception as e:
            logging.error(f"Unexpected delivery error for user {recipient.userId}: {e}", exc_info=True)
            return DeliveryOutcome(userId=recipient.userId, persisted=False, reason=REASON_DELIVERY_FAILED)

    def fan_out(self, recipients: Iterable[Recipient],
                build: Callable[[Recipient], Optional[NotificationContent]]) -> Tuple[DeliveryOutcome, ...]:
        """
        Delivers to every recipient concurrently and waits for all of them.

        `build` returns the content for one recipient, or None to skip them.
        One recipient's failure never affects another; the result holds one
        outcome per recipient that was not skipped, in input order.
        """
        recipients = tuple(recipients)
        if not recipients:
            return ()

        workers = min(self.max_workers, len(recipients))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(lambda r: self._deliver_isolated(r, build), recipients))

        delivered = tuple(o for o in outcomes if o is not None)
        failed = sum(1 for o in delivered if not o.ok)
        pushed = sum(1 for o in delivered if o.pushed)
        logging.info(f"Fan-out complete: {len(delivered)} notification(s), {pushed} pushed, {failed} failed.")
        return delivered

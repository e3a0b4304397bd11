import datetime
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from google.cloud import firestore
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from exceptions import MalformedInputError

# Rank label a user has before the gamification layer assigns one.
DEFAULT_RANK = "Green Beginner"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Metric(str, Enum):
    STREAK = "streak"
    POINTS = "points"
    RANK = "rank"


# Firestore field backing each metric on a users/{userId} document.
METRIC_FIELDS = {
    Metric.STREAK: "streak",
    Metric.POINTS: "ecoPoints",
    Metric.RANK: "title",
}


# --- CONTENT POOL ---
class ContentEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    rewardPoints: int = Field(default=0, ge=0, alias="points")
    difficulty: Optional[Difficulty] = None
    category: str
    icon: str

    def to_challenge_document(self) -> dict:
        """Shape stored inside challenges/{date}.challenges."""
        doc = {
            "id": self.id,
            "title": self.title,
            "points": self.rewardPoints,
            "icon": self.icon,
            "category": self.category,
        }
        if self.difficulty is not None:
            doc["difficulty"] = self.difficulty.value
        return doc


class SelectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    mode: str
    entries: Tuple[ContentEntry, ...]

    def to_challenges_document(self) -> dict:
        return {
            "date": self.date,
            "challenges": [entry.to_challenge_document() for entry in self.entries],
            "createdAt": firestore.SERVER_TIMESTAMP,
        }

    def to_tip_document(self) -> dict:
        tip = self.entries[0]
        return {
            "tip": tip.title,
            "category": tip.category,
            "emoji": tip.icon,
            "date": self.date,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }


# --- USER STATE ---
class UserMetricTransition(BaseModel):
    """Before/after value of one metric on a user document. Never stored."""
    model_config = ConfigDict(frozen=True)

    userId: str
    metric: Metric
    before: Union[int, str]
    after: Union[int, str]

    @model_validator(mode="after")
    def check_value_types(self):
        expected = str if self.metric == Metric.RANK else int
        for value in (self.before, self.after):
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ValueError(f"{self.metric.value} values must be {expected.__name__}, got {value!r}")
        return self

    @classmethod
    def from_snapshots(cls, user_id: str, metric: Metric, before: dict, after: dict) -> "UserMetricTransition":
        field = METRIC_FIELDS[metric]
        default = DEFAULT_RANK if metric == Metric.RANK else None
        try:
            return cls(
                userId=user_id,
                metric=metric,
                before=(before or {}).get(field, default),
                after=(after or {}).get(field, default),
            )
        except ValidationError as e:
            raise MalformedInputError(f"User {user_id} has an invalid '{field}' field: {e.errors()}") from e


class UserRecord(BaseModel):
    """The parts of a users/{userId} document the scheduled jobs read."""
    model_config = ConfigDict(extra="ignore")

    userId: str
    fcmToken: Optional[str] = None
    streak: int = Field(default=0, ge=0)
    lastChallengeDate: Optional[str] = None

    @classmethod
    def from_document(cls, user_id: str, data: Optional[dict]) -> "UserRecord":
        payload = dict(data or {})
        payload["userId"] = user_id
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise MalformedInputError(f"User document {user_id} could not be read: {e}") from e


class ScannedProduct(BaseModel):
    model_config = ConfigDict(extra="ignore")

    productId: str
    productName: str = "Product"
    ecoScore: float = Field(ge=0, le=100)

    @classmethod
    def from_document(cls, product_id: str, data: Optional[dict]) -> "ScannedProduct":
        data = data or {}
        name = data.get("productName") or data.get("name") or "Product"
        try:
            return cls(productId=product_id, productName=name, ecoScore=data.get("ecoScore"))
        except ValidationError as e:
            raise MalformedInputError(f"Scanned product {product_id} has no usable ecoScore: {e.errors()}") from e


# --- NOTIFICATIONS ---
class NotificationContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    category: str
    data: Dict[str, str] = {}

    @field_validator("data", mode="before")
    @classmethod
    def stringify_data(cls, value):
        # FCM only accepts string values in the data payload
        return {str(k): str(v) for k, v in (value or {}).items()}


class NotificationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: str
    title: str
    body: str
    category: str
    data: Dict[str, str] = {}
    read: bool = False
    createdAt: datetime.datetime

    @classmethod
    def from_content(cls, user_id: str, content: NotificationContent, created_at: datetime.datetime) -> "NotificationRecord":
        return cls(
            userId=user_id,
            title=content.title,
            body=content.body,
            category=content.category,
            data=content.data,
            createdAt=created_at,
        )

    def to_document(self) -> dict:
        return {
            "userId": self.userId,
            "title": self.title,
            "body": self.body,
            "category": self.category,
            "data": dict(self.data),
            "read": self.read,
            "timestamp": firestore.SERVER_TIMESTAMP,
            "createdAt": self.createdAt.isoformat(),
        }


class Recipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: str
    fcmToken: Optional[str] = None


class PushResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    sent: bool
    messageId: Optional[str] = None
    reason: Optional[str] = None


class DeliveryOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: str
    persisted: bool
    pushed: bool = False
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.persisted

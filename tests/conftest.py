import datetime
import itertools
import threading
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.types import StructuredQuery

from config import Settings
from delivery import DeliveryOrchestrator, PushClient
from dependencies import Services

FIXED_NOW = datetime.datetime(2025, 11, 9, 12, 0, tzinfo=datetime.timezone.utc)
TODAY = datetime.date(2025, 11, 9)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.collection.docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self.collection.docs:
            self.collection.docs[self.id].update(data)
        else:
            self.collection.docs[self.id] = dict(data)

    def update(self, data):
        if self.id not in self.collection.docs:
            raise gcp_exceptions.NotFound(f"No document to update: {self.collection.name}/{self.id}")
        doc = self.collection.docs[self.id]
        for key, value in data.items():
            if isinstance(value, firestore.Increment):
                doc[key] = doc.get(key, 0) + value.value
            else:
                doc[key] = value


class FakeQuery:
    OPS = {
        "==": lambda a, b: a == b,
        "!=": lambda a, b: a is not None and a != b,
        # FieldFilter(field, "!=", None) is sent as a unary IS_NOT_NULL filter
        StructuredQuery.UnaryFilter.Operator.IS_NOT_NULL: lambda a, b: a is not None,
    }

    def __init__(self, collection, field_filter):
        self.collection = collection
        self.field_filter = field_filter

    def stream(self):
        compare = self.OPS[self.field_filter.op_string]
        for doc_id, data in list(self.collection.docs.items()):
            if compare(data.get(self.field_filter.field_path), self.field_filter.value):
                yield FakeSnapshot(doc_id, data)


class FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.docs = {}

    def document(self, doc_id):
        return FakeDocRef(self, doc_id)

    def add(self, data):
        if data.get("userId") in self.db.fail_add_for:
            raise gcp_exceptions.ServiceUnavailable("Firestore unavailable")
        doc_id = f"{self.name}-{next(self.db.ids)}"
        with self.db.lock:
            self.docs[doc_id] = dict(data)
        return None, FakeDocRef(self, doc_id)

    def where(self, filter=None):
        return FakeQuery(self, filter)

    def stream(self):
        for doc_id, data in list(self.docs.items()):
            yield FakeSnapshot(doc_id, data)


class FakeBatch:
    def __init__(self):
        self.writes = []
        self.committed = False

    def set(self, doc_ref, data, merge=False):
        self.writes.append((doc_ref, data, merge))

    def commit(self):
        for doc_ref, data, merge in self.writes:
            doc_ref.set(data, merge=merge)
        self.committed = True


class FakeFirestore:
    """Just enough of google.cloud.firestore.Client for the jobs and triggers."""

    def __init__(self):
        self.collections = {}
        self.fail_add_for = set()
        self.ids = itertools.count(1)
        self.lock = threading.Lock()
        self.batches = []

    def collection(self, name):
        with self.lock:
            return self.collections.setdefault(name, FakeCollection(self, name))

    def batch(self):
        self.batches.append(FakeBatch())
        return self.batches[-1]

    def docs(self, name):
        return self.collection(name).docs


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def push_client():
    client = MagicMock(spec=PushClient)
    client.send.side_effect = lambda token, content: f"projects/ecopilot/messages/{token}"
    return client


@pytest.fixture
def settings():
    return Settings(log_file_path="/tmp/ecopilot_test.log", fanout_max_workers=4)


@pytest.fixture
def services(settings, db, push_client):
    delivery = DeliveryOrchestrator(db, push_client, max_workers=settings.fanout_max_workers, clock=lambda: FIXED_NOW)
    return Services(settings, db, delivery)


def add_user(db, user_id, **fields):
    db.collection("users").document(user_id).set(fields)

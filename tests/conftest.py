import copy
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError

from smsverify.services.gateway import TestGatewayClient


class FakeCollection:
    """
    In-memory stand-in for the pymongo calls the contact service makes.
    """

    def __init__(self):
        self.documents = []
        self.indexes = []

    def _matches(self, document, query):
        return all(document.get(key) == value for key, value in query.items())

    def insert_one(self, document):
        if any(d["contact_id"] == document["contact_id"] for d in self.documents):
            raise DuplicateKeyError("E11000 duplicate key error: contact_id")
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(acknowledged=True, inserted_id=document["contact_id"])

    def find_one(self, query):
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    def replace_one(self, query, replacement, upsert=False):
        for index, document in enumerate(self.documents):
            if self._matches(document, query):
                self.documents[index] = copy.deepcopy(replacement)
                return SimpleNamespace(acknowledged=True, matched_count=1)
        if upsert:
            self.documents.append(copy.deepcopy(replacement))
        return SimpleNamespace(acknowledged=True, matched_count=0)

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return kwargs.get("name")


class Contact:
    """Attribute-style record, the way an ORM model looks."""

    def __init__(self, phone_number="2345678901", blocked=False, confirmation_code=None,
                 confirmed_phone_number=None, save_result=True):
        self.phone_number = phone_number
        self.blocked = blocked
        self.confirmation_code = confirmation_code
        self.confirmation_attempted_at = None
        self.confirmed_phone_number = confirmed_phone_number
        self.save_result = save_result
        self.save_count = 0

    def save(self):
        self.save_count += 1
        return self.save_result


@pytest.fixture
def gateway():
    return TestGatewayClient()


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def contact():
    return Contact()


@pytest.fixture
def confirmed_contact():
    return Contact(confirmation_code="123456", confirmed_phone_number="2345678901")


@pytest.fixture
def make_contact():
    return Contact

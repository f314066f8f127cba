# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared fixtures: an in-memory SQLite store, a fake MailChimp and a TestClient
wired to both through FastAPI dependency overrides.
"""
import hashlib
import os
import random

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from main import app
from member_sync.core.dependencies import get_member_repo, get_member_service
from member_sync.repositories.member_repository import MemberRepository
from member_sync.services.member_service import MemberService

MAILCHIMP_EXCEPTION_MESSAGE = "MailChimp exception"


class FakeMailChimp:
    """Records every call; ``fail_on`` lists the HTTP verbs that should raise."""

    def __init__(self):
        self.calls = []
        self.fail_on = set()

    def _record(self, method, path, body):
        self.calls.append((method, path, body))
        if method in self.fail_on:
            raise Exception(MAILCHIMP_EXCEPTION_MESSAGE)

    def post(self, path, body=None):
        self._record("post", path, body)
        if path.endswith("/members"):
            subscriber_hash = hashlib.md5(body["email_address"].lower().encode()).hexdigest()
            return {"id": subscriber_hash, **body}
        return {}

    def patch(self, path, body):
        self._record("patch", path, body)
        return dict(body)

    def delete(self, path, body=None):
        self._record("delete", path, body)
        return {}


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def repo(engine):
    repository = MemberRepository(engine)
    repository.init_schema()
    return repository


@pytest.fixture
def mailchimp():
    return FakeMailChimp()


@pytest.fixture
def service(repo, mailchimp):
    return MemberService(repo, mailchimp)


@pytest.fixture
def client(repo, service):
    app.dependency_overrides[get_member_repo] = lambda: repo
    app.dependency_overrides[get_member_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mc_list(repo):
    return repo.create_list("New list", mail_chimp_id="b1c2d3e4f5")


@pytest.fixture
def make_member_data():
    def _make():
        return {
            "email_address": f"{random.randint(100000, 999999)}michaeltest@emailtest1.com",
            "email_type": "html",
            "status": "subscribed",
            "merge_fields": {
                "FNAME": "First Name",
                "LNAME": "Last Name",
                "ADDRESS": {
                    "addr1": "Street name",
                    "addr2": "",
                    "city": "City",
                    "state": "State",
                    "zip": "ZIP",
                    "country": "US",
                },
                "PHONE": "88005553535",
                "BIRTHDAY": "12/12",
            },
            "interests": {},
            "language": "ru",
            "vip": False,
            "location": {"latitude": "-21.8052", "longitude": "-49.0898"},
            "marketing_permissions": [
                {"marketing_permission_id": "id123", "enabled": True},
            ],
            "ip_signup": "49.57.48.99",
            "timestamp_signup": "2020-07-14T18:08:13+00:00",
            "ip_opt": "49.114.199.119",
            "timestamp_opt": "2020-07-14T17:53:54+00:00",
            "tags": ["test tag 1", "test tag 2"],
        }
    return _make


@pytest.fixture
def member_data(make_member_data):
    return make_member_data()

from datetime import datetime, timezone

import pytest

from config import GatewayConfig
from store import ObjectSummary


class FakeStore:
    def __init__(self, objects=()):
        self.objects = list(objects)
        self.list_calls = 0
        self.presigned = []

    def list_objects(self):
        self.list_calls += 1
        return list(self.objects)

    def presign(self, operation, key, ttl, content_type=None):
        self.presigned.append((operation, key, ttl, content_type))
        return f"https://store.test/files/{key}?op={operation}&ttl={ttl}&n={len(self.presigned)}"

    @property
    def calls(self):
        return self.list_calls + len(self.presigned)


@pytest.fixture
def store():
    return FakeStore([
        ObjectSummary("a.txt", 12, datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)),
        ObjectSummary("docs/b.pdf", 2048, datetime(2024, 5, 2, 10, 0, tzinfo=timezone.utc)),
    ])


@pytest.fixture
def config():
    return GatewayConfig(bucket="files", endpoint_url="https://acct.r2.cloudflarestorage.com",
                         auth_password="s3cret")

import copy
from typing import Any, Iterable, List, Optional

import pytest

from app.core.config import settings
from app.services.model_invoker import ModelCallError, ModelInvoker

TEST_JWT_SECRET = "kisan-setu-test-secret-key-0123456789abcdef"


class FakeInvoker(ModelInvoker):
    """Returns queued replies in order; an Exception in the queue is raised."""

    def __init__(self, replies: Iterable[Any] = ()):
        self.replies: List[Any] = list(replies)
        self.calls: List[dict] = []

    async def invoke(
        self,
        prompt,
        attachments=None,
        history=None,
        *,
        system_instruction=None,
        json_output=True,
    ):
        self.calls.append(
            {
                "prompt": prompt,
                "attachments": list(attachments or []),
                "history": list(history or []),
                "system_instruction": system_instruction,
                "json_output": json_output,
            }
        )
        if not self.replies:
            raise ModelCallError("no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class _FakeCursor:
    def __init__(self, docs: List[dict]):
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "_FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """In-memory stand-in for the few motor collection calls the app makes."""

    def __init__(self):
        self.docs: dict[str, dict] = {}

    @staticmethod
    def _matches(doc: dict, query: dict) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    def find(self, query: dict) -> _FakeCursor:
        return _FakeCursor(
            [copy.deepcopy(d) for d in self.docs.values() if self._matches(d, query)]
        )

    async def find_one(self, query: dict) -> Optional[dict]:
        for doc in self.docs.values():
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def replace_one(self, query: dict, payload: dict, upsert: bool = False):
        self.docs[query["_id"]] = copy.deepcopy(payload)

    async def delete_one(self, query: dict):
        self.docs.pop(query["_id"], None)


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "NEWS_PROXY_URL", "")


@pytest.fixture
def fake_collection(monkeypatch) -> FakeCollection:
    collection = FakeCollection()
    monkeypatch.setattr(
        "app.collections.chat_session.get_chat_session_collection", lambda: collection
    )
    return collection

import threading

import pytest

from services.assignee_resolver import AssigneeResolver
from services.errors import SourceFetchError


class CountingSource:
    def __init__(self, emails, failing=()):
        self.emails = emails
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def user_email(self, user_gid):
        with self._lock:
            self.calls.append(user_gid)
        if user_gid in self.failing:
            raise SourceFetchError("Forbidden", status_code=403)
        return self.emails.get(user_gid)


def test_duplicates_are_looked_up_once():
    source = CountingSource({"u1": "one@example.org", "u2": "two@example.org"})
    resolver = AssigneeResolver(source, max_workers=2)

    emails = resolver.resolve(["u1", "u2", "u1", None, "", "u2"])

    assert emails == {"u1": "one@example.org", "u2": "two@example.org"}
    assert sorted(source.calls) == ["u1", "u2"]


def test_failure_and_missing_email_are_omitted():
    source = CountingSource({"ok": "ok@example.org"}, failing={"broken"})
    resolver = AssigneeResolver(source)

    emails = resolver.resolve(["ok", "broken", "no-email"])

    assert emails == {"ok": "ok@example.org"}
    assert sorted(source.calls) == ["broken", "no-email", "ok"]


def test_cache_spans_calls_on_the_same_instance():
    source = CountingSource({"u1": "one@example.org"})
    resolver = AssigneeResolver(source)

    resolver.resolve(["u1"])
    again = resolver.resolve(["u1", "u1"])

    assert again == {"u1": "one@example.org"}
    assert source.calls == ["u1"]


def test_result_only_contains_requested_ids():
    source = CountingSource({"u1": "one@example.org", "u2": "two@example.org"})
    resolver = AssigneeResolver(source)

    resolver.resolve(["u1"])
    assert resolver.resolve(["u2"]) == {"u2": "two@example.org"}


def test_empty_request_makes_no_calls():
    source = CountingSource({})
    assert AssigneeResolver(source).resolve([]) == {}
    assert source.calls == []


def test_worker_count_must_be_positive():
    with pytest.raises(ValueError):
        AssigneeResolver(CountingSource({}), max_workers=0)

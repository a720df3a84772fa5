# File: tests/test_store.py
import json
from datetime import datetime, timezone

import pytest

from site_health.crawler.models import Issue, IssueType, Severity
from site_health.errors import PersistenceError
from site_health.store import InMemoryIssueStore, IssueStore, JsonIssueStore


def issue(site="s1", severity=Severity.HIGH, resolved=False) -> Issue:
    return Issue(
        site_id=site,
        page_url="https://example.com/",
        type=IssueType.MISSING_H1,
        severity=severity,
        description="Page is missing an H1 tag",
        resolved=resolved,
    )


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(InMemoryIssueStore(), IssueStore)
    assert isinstance(JsonIssueStore(tmp_path / "x.json"), IssueStore)


@pytest.mark.asyncio()
async def test_insert_stamps_created_at(store):
    item = issue()
    await store.insert_issue(item)
    assert item.created_at is not None
    assert item.created_at.tzinfo is not None


@pytest.mark.asyncio()
async def test_unresolved_severities_filter_site_and_status(store):
    await store.insert_issue(issue(severity=Severity.CRITICAL))
    await store.insert_issue(issue(severity=Severity.LOW, resolved=True))
    await store.insert_issue(issue(site="s2", severity=Severity.MEDIUM))
    assert await store.query_unresolved_severities("s1") == [Severity.CRITICAL]
    assert len(await store.issues_for("s1")) == 2
    assert len(await store.issues_for("s1", unresolved_only=True)) == 1


@pytest.mark.asyncio()
async def test_insert_only_keeps_duplicates(store):
    await store.insert_issue(issue())
    await store.insert_issue(issue())
    assert await store.query_unresolved_severities("s1") == [Severity.HIGH, Severity.HIGH]


@pytest.mark.asyncio()
async def test_update_site(store):
    now = datetime.now(timezone.utc)
    await store.update_site("s1", last_crawled_at=now)
    await store.update_site("s1", health_score=70)
    site = await store.get_site("s1")
    assert site.last_crawled_at == now
    assert site.health_score == 70
    with pytest.raises(ValueError):
        await store.update_site("s1", health_score=101)


@pytest.mark.asyncio()
async def test_json_store_round_trip(tmp_path):
    path = tmp_path / "data" / "issues.json"
    first = JsonIssueStore(path)
    await first.insert_issue(issue(severity=Severity.MEDIUM))
    await first.update_site("s1", health_score=95)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["issues"][0]["issue_type"] == "missing_h1"
    assert raw["issues"][0]["is_fixed"] is False

    second = JsonIssueStore(path)
    assert await second.query_unresolved_severities("s1") == [Severity.MEDIUM]
    assert (await second.get_site("s1")).health_score == 95


@pytest.mark.asyncio()
async def test_json_store_corrupt_file(tmp_path):
    path = tmp_path / "issues.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        await JsonIssueStore(path).query_unresolved_severities("s1")


@pytest.mark.asyncio()
async def test_json_store_unwritable(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(PersistenceError):
        await JsonIssueStore(blocker / "issues.json").insert_issue(issue())

# File: tests/test_frontier.py
import pytest

from site_health.crawler.frontier import Frontier
from site_health.crawler.link_extractor import normalize_url, registrable_domain

ROOT = "https://example.com/"


def drain(frontier: Frontier) -> list[str]:
    """Run the crawl loop contract: budget check, dequeue, mark visited."""
    fetched = []
    while frontier.has_budget():
        url = frontier.next()
        if url is None:
            break
        frontier.mark_visited(url)
        fetched.append(url)
        assert len(frontier.visited) <= frontier.budget
    return fetched


def test_fifo_order():
    f = Frontier(ROOT, budget=10)
    f.seed([f"{ROOT}a", f"{ROOT}b", f"{ROOT}c"])
    assert [f.next(), f.next(), f.next()] == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
    ]
    assert f.next() is None


def test_next_on_empty_queue_returns_none():
    assert Frontier(ROOT, budget=1).next() is None


def test_budget_limits_fetches():
    f = Frontier(ROOT, budget=2)
    f.seed([f"{ROOT}page{i}" for i in range(5)])
    fetched = drain(f)
    assert len(fetched) == 2
    assert len(f.visited) == 2
    assert len(f) == 3


def test_zero_budget_fetches_nothing():
    f = Frontier(ROOT, budget=0)
    f.seed([ROOT])
    assert drain(f) == []


def test_negative_budget_rejected():
    with pytest.raises(ValueError):
        Frontier(ROOT, budget=-1)


def test_seeding_visited_url_is_noop():
    f = Frontier(ROOT, budget=5)
    f.seed([ROOT])
    f.mark_visited(f.next())
    assert f.seed([ROOT, "https://EXAMPLE.com"]) == 0
    assert f.next() is None


def test_seed_twice_queues_once():
    f = Frontier(ROOT, budget=5)
    assert f.seed([f"{ROOT}a", f"{ROOT}a/", f"{ROOT}a#top"]) == 1
    assert f.pending == ("https://example.com/a",)


def test_alias_leaves_queue_without_using_budget():
    f = Frontier(ROOT, budget=2)
    f.seed([ROOT, f"{ROOT}old", f"{ROOT}new"])
    f.mark_visited(f.next())
    f.mark_alias(f"{ROOT}new/")
    assert f.pending == ("https://example.com/old",)
    assert f.discover([f"{ROOT}new"]) == 0
    assert not f.is_visited(f"{ROOT}new")
    assert f.has_budget()
    assert drain(f) == ["https://example.com/old"]


def test_alias_of_visited_url_is_noop():
    f = Frontier(ROOT, budget=2)
    f.mark_visited(ROOT)
    f.mark_alias(ROOT)
    assert f.is_visited("HTTPS://Example.com")
    assert f.visited == {ROOT}


def test_never_revisits_discovered_url():
    f = Frontier(ROOT, budget=10)
    f.seed([ROOT])
    f.discover([f"{ROOT}about", f"{ROOT}about"])
    fetched = drain(f)
    f.discover([f"{ROOT}about", ROOT])
    fetched += drain(f)
    assert fetched == ["https://example.com/", "https://example.com/about"]


def test_mark_visited_is_idempotent():
    f = Frontier(ROOT, budget=1)
    f.mark_visited(ROOT)
    f.mark_visited(ROOT)
    assert f.visited == {"https://example.com/"}
    assert not f.has_budget()


def test_mark_visited_removes_queued_copy():
    f = Frontier(ROOT, budget=3)
    f.seed([f"{ROOT}a", f"{ROOT}b"])
    f.mark_visited(f"{ROOT}b")
    assert f.pending == ("https://example.com/a",)


def test_discover_restricted_to_registrable_domain():
    f = Frontier("https://www.example.co.uk/", budget=10)
    added = f.discover(
        [
            "https://shop.example.co.uk/cart",
            "http://example.co.uk/about",
            "https://other.co.uk/",
            "https://example.com/",
            "mailto:info@example.co.uk",
            "ftp://example.co.uk/file",
        ]
    )
    assert added == 2
    assert f.pending == ("https://shop.example.co.uk/cart", "http://example.co.uk/about")


def test_discover_on_localhost():
    f = Frontier("http://localhost:8080/", budget=10)
    assert f.discover(["http://localhost:8080/a", "http://127.0.0.1:8080/b"]) == 1


@pytest.mark.parametrize(
    "url,expected",
    [
        ("HTTPS://Example.COM", "https://example.com/"),
        ("https://example.com/blog/", "https://example.com/blog"),
        ("https://example.com/blog#intro", "https://example.com/blog"),
        ("https://example.com/search?q=seo", "https://example.com/search?q=seo"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


@pytest.mark.parametrize(
    "host,expected",
    [
        ("example.com", "example.com"),
        ("https://blog.example.com/post", "example.com"),
        ("www.example.co.uk", "example.co.uk"),
        ("localhost", "localhost"),
    ],
)
def test_registrable_domain(host, expected):
    assert registrable_domain(host) == expected

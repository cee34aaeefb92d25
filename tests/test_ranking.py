"""
Tests for relevance scoring and result merging.
"""

from datetime import datetime, timedelta, timezone

import pytest

from geonews.ranking.merger import merge
from geonews.ranking.scorer import NEUTRAL_SCORE, ScoredResult, score, score_results
from geonews.search.exa_client import EPOCH


class TestScore:
    def test_neutral_without_location(self, make_item):
        assert score(make_item(title="Mumbai"), None) == NEUTRAL_SCORE

    def test_city_and_region(self, make_item, mumbai):
        item = make_item(title="Mumbai rains", body_text="Heavy rain across Maharashtra")
        assert score(item, mumbai) == pytest.approx(0.5)

    def test_keywords_counted_once(self, make_item, mumbai):
        item = make_item(title="Bandra bandra BANDRA")
        assert score(item, mumbai) == pytest.approx(0.05)

    def test_preferred_domain(self, make_item, mumbai):
        item = make_item(url="https://www.mid-day.com/sports/cricket", title="Cricket")
        assert score(item, mumbai) == pytest.approx(0.2)

    def test_url_is_searched(self, make_item, mumbai):
        item = make_item(url="https://example.com/bombay-high-court", title="Ruling")
        assert score(item, mumbai) == pytest.approx(0.2)

    def test_saturates_at_one(self, make_item, mumbai):
        item = make_item(
            url="https://www.mid-day.com/mumbai/bandra",
            title="Mumbai, Maharashtra: Bombay, Bollywood and Thane",
            body_text="juhu andheri dharavi navi mumbai kalyan vasai marine drive",
        )
        assert score(item, mumbai) == 1.0

    def test_unrelated_result(self, make_item, mumbai):
        assert score(make_item(title="Quarterly earnings"), mumbai) == 0.0

    def test_score_results_keeps_strategy_index(self, make_item, mumbai):
        first = make_item(url="https://a.example", title="Mumbai")
        second = make_item(url="https://b.example", title="Elsewhere")
        scored = score_results([(0, first), (2, second)], mumbai)
        assert [result.strategy_index for result in scored] == [0, 2]
        assert scored[0].relevance_score == pytest.approx(0.3)
        assert scored[1].relevance_score == 0.0


def scored(make_item, url, relevance, published_at=None, strategy_index=0):
    return ScoredResult(
        item=make_item(url=url, published_at=published_at),
        relevance_score=relevance,
        strategy_index=strategy_index,
    )


class TestMerge:
    def test_duplicate_url_keeps_first(self, make_item, now):
        results = [
            scored(make_item, "https://a.example", 0.9),
            scored(make_item, "https://a.example", 0.3),
        ]
        ranked = merge(results, limit=10, now=now)
        assert len(ranked) == 1
        assert ranked[0].relevance_score == 0.9

    def test_location_specific_prefers_relevance(self, make_item, now):
        results = [
            scored(make_item, "https://low.example", 0.6),
            scored(make_item, "https://high.example", 0.9),
        ]
        ranked = merge(results, limit=10, location_specific=True, now=now)
        assert ranked.urls == ["https://high.example", "https://low.example"]

    def test_newer_first_on_equal_relevance(self, make_item, now):
        results = [
            scored(make_item, "https://old.example", 0.5, published_at=now - timedelta(days=365)),
            scored(make_item, "https://new.example", 0.5, published_at=now),
        ]
        assert merge(results, limit=10, now=now).urls == [
            "https://new.example",
            "https://old.example",
        ]

    def test_weights_shift_toward_relevance(self, make_item, now):
        results = [
            scored(make_item, "https://fresh.example", 0.2, published_at=now),
            scored(make_item, "https://relevant.example", 0.55, published_at=EPOCH),
        ]
        assert merge(results, limit=2, now=now).urls[0] == "https://fresh.example"
        assert merge(results, limit=2, location_specific=True, now=now).urls[0] == (
            "https://relevant.example"
        )

    def test_ties_follow_strategy_order(self, make_item, now):
        results = [
            scored(make_item, "https://later.example", 0.5, strategy_index=1),
            scored(make_item, "https://earlier.example", 0.5, strategy_index=0),
            scored(make_item, "https://later-2.example", 0.5, strategy_index=1),
        ]
        assert merge(results, limit=10, now=now).urls == [
            "https://earlier.example",
            "https://later.example",
            "https://later-2.example",
        ]

    def test_limit(self, make_item, now):
        results = [scored(make_item, f"https://{i}.example", i / 10) for i in range(6)]
        ranked = merge(results, limit=3, now=now)
        assert len(ranked) == 3
        assert ranked.urls[0] == "https://5.example"
        assert len(merge(results, limit=50, now=now)) == 6

    def test_output_urls_are_unique(self, make_item, now):
        results = [
            scored(make_item, f"https://{i % 3}.example", 0.1 * i) for i in range(9)
        ]
        ranked = merge(results, limit=20, now=now)
        assert len(ranked.urls) == len(set(ranked.urls)) == 3

    def test_empty_input(self, now):
        ranked = merge([], limit=10, now=now)
        assert len(ranked) == 0
        assert ranked.count == 0

    def test_default_now(self, make_item):
        published = datetime.now(timezone.utc) - timedelta(hours=1)
        ranked = merge([scored(make_item, "https://a.example", 0.5, published_at=published)], 5)
        assert ranked.urls == ["https://a.example"]

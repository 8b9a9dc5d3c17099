"""Scoring primitives: alt-text steps, aggregates, and empty-set rejection."""

import pytest

from saas_image_crawler.core import scoring
from saas_image_crawler.core.errors import EmptyImageSetError, InvalidParamsError
from saas_image_crawler.core.scoring import ScoringConfig

from conftest import make_image


@pytest.mark.parametrize(
    "length, expected",
    [(0, 0), (9, 2), (10, 4), (29, 4), (30, 6), (59, 6), (60, 8), (99, 8), (100, 10), (1000, 10)],
)
def test_alt_text_score_steps(length, expected):
    assert scoring.score_alt_text("x" * length) == expected


def test_alt_text_score_missing():
    assert scoring.score_alt_text(None) == 0


def test_overall_quality_is_mean_of_alt_scores():
    images = [make_image(1, alt="x" * 5), make_image(2, alt="x" * 45), make_image(3, alt="")]
    assert scoring.overall_quality(images) == pytest.approx((2 + 6 + 0) / 3)


def test_overall_quality_bounds():
    images = [make_image(i, alt="x" * (i * 37)) for i in range(6)]
    assert 0 <= scoring.overall_quality(images) <= 10


def test_diversity_all_identical_hashes():
    images = [make_image(i, hash="same") for i in range(4)]
    assert scoring.diversity_score(images) == pytest.approx(25.0)


def test_diversity_all_distinct_hashes():
    images = [make_image(i) for i in range(5)]
    assert scoring.diversity_score(images) == pytest.approx(100.0)


def test_unique_urls_counts_duplicates_once():
    images = [make_image(1, url="https://a.com/x.png"), make_image(2, url="https://a.com/x.png")]
    assert scoring.unique_urls(images) == 1


def test_marketing_keywords_case_insensitive_and_counted_once():
    alt = "DASHBOARD dashboard Analytics"
    assert scoring.matched_keywords(alt) == ["dashboard", "analytics"]
    assert scoring.marketing_matches(alt) == 2


def test_marketing_score_scales_average_by_two():
    images = [make_image(1, alt="analytics dashboard"), make_image(2, alt="team photo")]
    assert scoring.marketing_score(images) == pytest.approx(2.0)


def test_marketing_score_is_not_capped_at_ten():
    alt = "dashboard interface analytics report chart graph"
    images = [make_image(1, alt=alt)]
    assert scoring.marketing_score(images) == pytest.approx(12.0)


def test_custom_keyword_table():
    config = ScoringConfig(marketing_keywords=("pricing",), marketing_scale=10.0)
    images = [make_image(1, alt="Pricing dashboard")]
    assert scoring.marketing_score(images, config) == pytest.approx(10.0)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://a.com/hero.webp", "WebP"),
        ("https://a.com/hero.jpg", "JPEG"),
        ("https://a.com/hero.jpeg", "JPEG"),
        ("https://a.com/hero.png", "PNG"),
        ("https://a.com/hero.gif", "GIF"),
        ("https://a.com/logo.svg", "SVG"),
        ("https://a.com/image?id=4", "Unknown"),
        ("https://a.com/hero.png.webp", "WebP"),
    ],
)
def test_image_format_priority(url, expected):
    assert scoring.image_format(url) == expected


def test_technical_counts():
    images = [
        make_image(1, url="https://bucket.s3.amazonaws.com/a.webp", hash="aa01"),
        make_image(2, url="https://cdn.example.com/b.png", hash="aa02"),
        make_image(3, url="https://bucket.s3.amazonaws.com/c.jpg", hash="bb03"),
    ]
    assert scoring.count_s3_hosted(images) == 2
    assert scoring.count_webp(images) == 1
    assert scoring.hash_prefix_buckets(images) == 2
    s3_pct, webp_pct = scoring.technical_percentages(images)
    assert s3_pct == pytest.approx(200 / 3)
    assert webp_pct == pytest.approx(100 / 3)


def test_webp_count_follows_configured_format_name():
    config = scoring.ScoringConfig(
        format_markers=(((".webp",), "WEBP"), ((".png",), "PNG")),
        webp_format="WEBP",
    )
    images = [
        make_image(1, url="https://a.com/a.webp", hash="aa01"),
        make_image(2, url="https://a.com/b.png", hash="aa02"),
    ]
    assert scoring.image_format(images[0].url, config) == "WEBP"
    assert scoring.count_webp(images, config) == 1
    assert scoring.technical_percentages(images, config)[1] == pytest.approx(50.0)


def test_short_and_missing_alt_counts():
    images = [make_image(1, alt=""), make_image(2, alt="   "), make_image(3, alt="short"), make_image(4, alt="x" * 40)]
    assert scoring.count_missing_alt(images) == 2
    assert scoring.count_short_alt(images) == 2


@pytest.mark.parametrize(
    "fn",
    [
        scoring.overall_quality,
        scoring.average_alt_length,
        scoring.diversity_score,
        scoring.marketing_score,
        scoring.hash_prefix_buckets,
        scoring.technical_percentages,
    ],
)
def test_aggregates_reject_empty_sets(fn):
    with pytest.raises(EmptyImageSetError) as excinfo:
        fn([])
    assert isinstance(excinfo.value, InvalidParamsError)

"""Image-set scoring primitives.

Pure functions over a sequence of ImageResult. Every aggregate divides by the
image count, so each one rejects an empty sequence with EmptyImageSetError.
Constants live in ScoringConfig so callers can substitute their own table.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel

from .errors import EmptyImageSetError
from .models import ImageResult


class ScoringConfig(BaseModel):
    """Keyword list, thresholds and markers used by the scoring functions."""

    marketing_keywords: tuple[str, ...] = (
        "dashboard",
        "interface",
        "analytics",
        "report",
        "chart",
        "graph",
        "widget",
        "feature",
        "tool",
        "platform",
    )
    # Average raw matches tops out around 5 in practice; x2 lands on a 0-10 band.
    marketing_scale: float = 2.0
    # (exclusive upper bound on alt length, score); anything longer scores alt_text_max.
    alt_text_bands: tuple[tuple[int, int], ...] = ((10, 2), (30, 4), (60, 6), (100, 8))
    alt_text_max: int = 10
    short_alt_length: int = 30
    s3_domain: str = "s3.amazonaws.com"
    # Checked in order; first marker found in the URL wins.
    format_markers: tuple[tuple[tuple[str, ...], str], ...] = (
        ((".webp",), "WebP"),
        ((".jpg", ".jpeg"), "JPEG"),
        ((".png",), "PNG"),
        ((".gif",), "GIF"),
        ((".svg",), "SVG"),
    )
    unknown_format: str = "Unknown"
    # Format name counted as modern delivery; must match a name in format_markers.
    webp_format: str = "WebP"
    hash_prefix_length: int = 2


DEFAULT_SCORING_CONFIG = ScoringConfig()


def _require_images(images: Sequence[ImageResult]) -> None:
    if not images:
        raise EmptyImageSetError()


def _pct(part: int, total: int) -> float:
    return part / total * 100


# ─── Alt text ────────────────────────────────────────────────────────────────


def score_alt_text(alt: Optional[str], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    """Step score 0-10 from alt-text length. Missing or empty alt text scores 0."""
    if not alt:
        return 0
    length = len(alt)
    for upper, score in config.alt_text_bands:
        if length < upper:
            return score
    return config.alt_text_max


def has_alt_text(image: ImageResult) -> bool:
    return bool(image.alt.strip())


def overall_quality(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Mean per-image alt-text score."""
    _require_images(images)
    return sum(score_alt_text(img.alt, config) for img in images) / len(images)


def average_alt_length(images: Sequence[ImageResult]) -> float:
    _require_images(images)
    return sum(len(img.alt) for img in images) / len(images)


def count_missing_alt(images: Sequence[ImageResult]) -> int:
    return sum(1 for img in images if not has_alt_text(img))


def count_short_alt(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    """Images that have some alt text, but fewer characters than the short-alt threshold."""
    return sum(1 for img in images if img.alt and len(img.alt) < config.short_alt_length)


# ─── Diversity ───────────────────────────────────────────────────────────────


def unique_hashes(images: Sequence[ImageResult]) -> int:
    return len({img.hash for img in images})


def unique_urls(images: Sequence[ImageResult]) -> int:
    return len({img.url for img in images})


def diversity_score(images: Sequence[ImageResult]) -> float:
    """Distinct content hashes as a percentage of the image count."""
    _require_images(images)
    return _pct(unique_hashes(images), len(images))


# ─── Marketing ───────────────────────────────────────────────────────────────


def matched_keywords(alt: Optional[str], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> list[str]:
    """Keywords occurring (case-insensitively) in the alt text, each counted once."""
    text = (alt or "").lower()
    return [kw for kw in config.marketing_keywords if kw in text]


def marketing_matches(alt: Optional[str], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return len(matched_keywords(alt, config))


def average_marketing_matches(
    images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG
) -> float:
    _require_images(images)
    return sum(marketing_matches(img.alt, config) for img in images) / len(images)


def marketing_score(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Average keyword matches times ``marketing_scale``.

    Reported against a 0-10 scale but not capped: a set whose alt texts each hit
    six or more keywords scores above 10.
    """
    return average_marketing_matches(images, config) * config.marketing_scale


# ─── Technical ───────────────────────────────────────────────────────────────


def image_format(url: str, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> str:
    for markers, name in config.format_markers:
        if any(marker in url for marker in markers):
            return name
    return config.unknown_format


def count_s3_hosted(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return sum(1 for img in images if config.s3_domain in img.url)


def count_webp(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    return sum(1 for img in images if image_format(img.url, config) == config.webp_format)


def hash_prefix_buckets(images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    """Number of distinct hash prefixes, a coarse diversity signal."""
    _require_images(images)
    return len({img.hash[: config.hash_prefix_length] for img in images})


def technical_percentages(
    images: Sequence[ImageResult], config: ScoringConfig = DEFAULT_SCORING_CONFIG
) -> tuple[float, float]:
    """(S3-hosted %, WebP %) of the set."""
    _require_images(images)
    total = len(images)
    return _pct(count_s3_hosted(images, config), total), _pct(count_webp(images, config), total)

"""Pydantic data models for crawl results, tool requests, and report records.

Tool arguments arrive as loosely-typed JSON objects. They are parsed into the
request models here before any handler runs; report records are produced by
``core.reports`` and rendered to text separately.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

ALLOWED_URL_SCHEMES = ("http", "https")
INVALID_URL_MESSAGE = "Invalid URL format. Must start with http:// or https://"


class AnalysisFocus(str, Enum):
    """What ``analyze_crawl_results`` looks at."""

    QUALITY = "quality"
    DIVERSITY = "diversity"
    MARKETING = "marketing"
    TECHNICAL = "technical"


class ComparisonType(str, Enum):
    """Metric used by ``compare_image_sets``."""

    QUANTITY = "quantity"
    QUALITY = "quality"
    DIVERSITY = "diversity"
    MARKETING_EFFECTIVENESS = "marketing_effectiveness"


class Winner(str, Enum):
    A = "A"
    B = "B"
    TIE = "tie"


# ─── Crawl data ──────────────────────────────────────────────────────────────


class ImageResult(BaseModel):
    """One crawled image."""

    model_config = ConfigDict(frozen=True)

    url: StrictStr
    alt: str = ""
    landing_page: str = ""
    hash: StrictStr

    @field_validator("alt", mode="before")
    @classmethod
    def _none_alt_is_empty(cls, value):
        return "" if value is None else value


class CrawlResultSet(BaseModel):
    """Structured output of one remote crawl."""

    source_url: Optional[str] = None
    generated_at: Optional[str] = None
    images: list[ImageResult]


# ─── Tool requests ───────────────────────────────────────────────────────────


def is_valid_crawl_url(url: str) -> bool:
    """True for absolute URLs whose scheme is exactly http or https."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ALLOWED_URL_SCHEMES and bool(parts.netloc)


class CrawlRequest(BaseModel):
    url: StrictStr
    force_refresh: bool = False

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not is_valid_crawl_url(value):
            raise ValueError(INVALID_URL_MESSAGE)
        return value


class AnalyzeRequest(BaseModel):
    results: CrawlResultSet
    focus: AnalysisFocus = AnalysisFocus.QUALITY

    @model_validator(mode="after")
    def _require_images(self) -> "AnalyzeRequest":
        if not self.results.images:
            raise ValueError("results.images must contain at least one image")
        return self


class CompareRequest(BaseModel):
    website_a: CrawlResultSet
    website_b: CrawlResultSet
    comparison_type: ComparisonType = ComparisonType.QUALITY

    @model_validator(mode="after")
    def _require_images(self) -> "CompareRequest":
        for side in ("website_a", "website_b"):
            if not getattr(self, side).images:
                raise ValueError(f"{side}.images must contain at least one image")
        return self


# ─── Report records ──────────────────────────────────────────────────────────


class ImageQuality(BaseModel):
    index: int
    url: str
    alt: str
    alt_length: int
    score: int = Field(ge=0, le=10)


class QualityReport(BaseModel):
    """Alt-text quality of a single result set."""

    kind: Literal["quality"] = "quality"
    source_url: str
    total_images: int
    images_with_alt: int
    alt_coverage_pct: float
    average_alt_length: float
    overall_score: float = Field(ge=0.0, le=10.0)
    images: list[ImageQuality]
    recommendations: list[str]

    def metrics(self) -> dict[str, float | int]:
        return {
            "total_images": self.total_images,
            "images_with_alt": self.images_with_alt,
            "alt_coverage_pct": self.alt_coverage_pct,
            "average_alt_length": self.average_alt_length,
            "overall_score": self.overall_score,
        }


class ImageSource(BaseModel):
    index: int
    landing_page: str
    hash: str


class DiversityReport(BaseModel):
    """Content-hash diversity of a single result set."""

    kind: Literal["diversity"] = "diversity"
    source_url: str
    total_images: int
    unique_hashes: int
    unique_urls: int
    diversity_score: float = Field(ge=0.0, le=100.0)
    rating: Literal["excellent", "good", "poor"]
    images: list[ImageSource]

    def metrics(self) -> dict[str, float | int | str]:
        return {
            "total_images": self.total_images,
            "unique_hashes": self.unique_hashes,
            "unique_urls": self.unique_urls,
            "diversity_score": self.diversity_score,
            "rating": self.rating,
        }


class ImageMarketing(BaseModel):
    index: int
    url: str
    alt: str
    matches: int
    matched_keywords: list[str]
    assessment: Literal["strong", "some", "weak"]


class MarketingReport(BaseModel):
    """Marketing-keyword density of a single result set.

    ``score`` is the average match count scaled by the configured factor. It is
    presented on a 0-10 scale but has no enforced ceiling.
    """

    kind: Literal["marketing"] = "marketing"
    source_url: str
    total_images: int
    score: float = Field(ge=0.0)
    average_matches: float
    keyword_count: int
    images: list[ImageMarketing]
    recommendations: list[str]

    def metrics(self) -> dict[str, float | int]:
        return {
            "total_images": self.total_images,
            "score": self.score,
            "average_matches": self.average_matches,
            "keyword_count": self.keyword_count,
        }


class ImageTechnical(BaseModel):
    index: int
    url: str
    hash: str
    format: str


class TechnicalReport(BaseModel):
    """Hosting and format breakdown of a single result set."""

    kind: Literal["technical"] = "technical"
    source_url: str
    total_images: int
    s3_images: int
    s3_pct: float
    webp_images: int
    webp_pct: float
    hash_prefixes: int
    images: list[ImageTechnical]

    def metrics(self) -> dict[str, float | int]:
        return {
            "total_images": self.total_images,
            "s3_images": self.s3_images,
            "s3_pct": self.s3_pct,
            "webp_images": self.webp_images,
            "webp_pct": self.webp_pct,
            "hash_prefixes": self.hash_prefixes,
        }


AnalysisReport = Annotated[
    Union[QualityReport, DiversityReport, MarketingReport, TechnicalReport],
    Field(discriminator="kind"),
]


class ComparisonResult(BaseModel):
    """One metric evaluated on two result sets."""

    kind: Literal["comparison"] = "comparison"
    comparison_type: ComparisonType
    label_a: str
    label_b: str
    score_a: float
    score_b: float
    difference: float = Field(ge=0.0, description="Absolute difference between the two scores")
    winner: Winner

    @property
    def winning_label(self) -> Optional[str]:
        if self.winner == Winner.A:
            return self.label_a
        if self.winner == Winner.B:
            return self.label_b
        return None

    @property
    def winning_score(self) -> Optional[float]:
        if self.winner == Winner.A:
            return self.score_a
        if self.winner == Winner.B:
            return self.score_b
        return None

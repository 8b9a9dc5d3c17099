"""Report builder and text renderer.

``build_*`` functions turn scoring output into report records;
``render_*`` functions turn those records into markdown text. Builders never
format strings and renderers never score.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from . import scoring
from .errors import EmptyImageSetError
from .models import (
    AnalysisFocus,
    AnalysisReport,
    ComparisonResult,
    ComparisonType,
    CrawlResultSet,
    DiversityReport,
    ImageMarketing,
    ImageQuality,
    ImageResult,
    ImageSource,
    ImageTechnical,
    MarketingReport,
    QualityReport,
    TechnicalReport,
    Winner,
)
from .scoring import DEFAULT_SCORING_CONFIG, ScoringConfig

UNKNOWN_SOURCE = "Unknown"
DEFAULT_LABEL_A = "Website A"
DEFAULT_LABEL_B = "Website B"

DIVERSITY_EXCELLENT = 90.0
DIVERSITY_GOOD = 70.0
STRONG_MARKETING_MATCHES = 2
LOW_MARKETING_AVERAGE = 1.0

OK = "✅"
WARN = "⚠️"
FAIL = "❌"
TROPHY = "\U0001f3c6"
HANDSHAKE = "\U0001f91d"


# ─── Builders: single result set ────────────────────────────────────────────


def build_quality_report(
    images: Sequence[ImageResult],
    source_url: str,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> QualityReport:
    total = len(images)
    overall = scoring.overall_quality(images, config)
    with_alt = sum(1 for img in images if scoring.has_alt_text(img))

    recommendations = []
    missing = scoring.count_missing_alt(images)
    if missing:
        recommendations.append(f"Add alt text to {missing} images")
    short = scoring.count_short_alt(images, config)
    if short:
        recommendations.append(f"Improve alt text for {short} images (too short)")
    if not recommendations:
        recommendations.append("All images have good quality alt text")

    return QualityReport(
        source_url=source_url,
        total_images=total,
        images_with_alt=with_alt,
        alt_coverage_pct=with_alt / total * 100,
        average_alt_length=scoring.average_alt_length(images),
        overall_score=overall,
        images=[
            ImageQuality(
                index=i,
                url=img.url,
                alt=img.alt,
                alt_length=len(img.alt),
                score=scoring.score_alt_text(img.alt, config),
            )
            for i, img in enumerate(images, start=1)
        ],
        recommendations=recommendations,
    )


def _diversity_rating(score: float) -> str:
    if score > DIVERSITY_EXCELLENT:
        return "excellent"
    if score > DIVERSITY_GOOD:
        return "good"
    return "poor"


def build_diversity_report(images: Sequence[ImageResult], source_url: str) -> DiversityReport:
    score = scoring.diversity_score(images)
    return DiversityReport(
        source_url=source_url,
        total_images=len(images),
        unique_hashes=scoring.unique_hashes(images),
        unique_urls=scoring.unique_urls(images),
        diversity_score=score,
        rating=_diversity_rating(score),
        images=[
            ImageSource(index=i, landing_page=img.landing_page, hash=img.hash)
            for i, img in enumerate(images, start=1)
        ],
    )


def _marketing_assessment(matches: int) -> str:
    if matches > STRONG_MARKETING_MATCHES:
        return "strong"
    if matches > 0:
        return "some"
    return "weak"


def build_marketing_report(
    images: Sequence[ImageResult],
    source_url: str,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> MarketingReport:
    average = scoring.average_marketing_matches(images, config)
    entries = []
    for i, img in enumerate(images, start=1):
        keywords = scoring.matched_keywords(img.alt, config)
        entries.append(ImageMarketing(
            index=i,
            url=img.url,
            alt=img.alt,
            matches=len(keywords),
            matched_keywords=keywords,
            assessment=_marketing_assessment(len(keywords)),
        ))

    recommendations = []
    weak = sum(1 for e in entries if e.matches == 0)
    if weak:
        recommendations.append(f"{weak} images need stronger marketing language")
    if average < LOW_MARKETING_AVERAGE:
        recommendations.append("Overall marketing effectiveness is low")
        recommendations.append("Consider adding more product-focused keywords")
    if not recommendations:
        recommendations.append("Marketing effectiveness is good")

    return MarketingReport(
        source_url=source_url,
        total_images=len(images),
        score=scoring.marketing_score(images, config),
        average_matches=average,
        keyword_count=len(config.marketing_keywords),
        images=entries,
        recommendations=recommendations,
    )


def build_technical_report(
    images: Sequence[ImageResult],
    source_url: str,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> TechnicalReport:
    s3_pct, webp_pct = scoring.technical_percentages(images, config)
    return TechnicalReport(
        source_url=source_url,
        total_images=len(images),
        s3_images=scoring.count_s3_hosted(images, config),
        s3_pct=s3_pct,
        webp_images=scoring.count_webp(images, config),
        webp_pct=webp_pct,
        hash_prefixes=scoring.hash_prefix_buckets(images, config),
        images=[
            ImageTechnical(index=i, url=img.url, hash=img.hash, format=scoring.image_format(img.url, config))
            for i, img in enumerate(images, start=1)
        ],
    )


def build_analysis(
    results: CrawlResultSet,
    focus: AnalysisFocus,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> AnalysisReport:
    """Build the report record for one analysis focus."""
    images = results.images
    source_url = results.source_url or UNKNOWN_SOURCE
    if focus == AnalysisFocus.QUALITY:
        return build_quality_report(images, source_url, config)
    if focus == AnalysisFocus.DIVERSITY:
        return build_diversity_report(images, source_url)
    if focus == AnalysisFocus.MARKETING:
        return build_marketing_report(images, source_url, config)
    if focus == AnalysisFocus.TECHNICAL:
        return build_technical_report(images, source_url, config)
    raise ValueError(f"Unsupported analysis focus: {focus}")


# ─── Builders: two result sets ──────────────────────────────────────────────


def _comparison_score(
    images: Sequence[ImageResult],
    comparison_type: ComparisonType,
    config: ScoringConfig,
) -> float:
    if comparison_type == ComparisonType.QUANTITY:
        return float(len(images))
    if comparison_type == ComparisonType.QUALITY:
        return scoring.overall_quality(images, config)
    if comparison_type == ComparisonType.DIVERSITY:
        return scoring.diversity_score(images)
    if comparison_type == ComparisonType.MARKETING_EFFECTIVENESS:
        return scoring.marketing_score(images, config)
    raise ValueError(f"Unsupported comparison type: {comparison_type}")


def pick_winner(score_a: float, score_b: float) -> Winner:
    """Strictly greater wins; exact equality is a tie."""
    if score_a > score_b:
        return Winner.A
    if score_b > score_a:
        return Winner.B
    return Winner.TIE


def build_comparison(
    website_a: CrawlResultSet,
    website_b: CrawlResultSet,
    comparison_type: ComparisonType,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ComparisonResult:
    if not website_a.images or not website_b.images:
        raise EmptyImageSetError("Both websites must have at least one image")
    score_a = _comparison_score(website_a.images, comparison_type, config)
    score_b = _comparison_score(website_b.images, comparison_type, config)
    return ComparisonResult(
        comparison_type=comparison_type,
        label_a=website_a.source_url or DEFAULT_LABEL_A,
        label_b=website_b.source_url or DEFAULT_LABEL_B,
        score_a=score_a,
        score_b=score_b,
        difference=abs(score_a - score_b),
        winner=pick_winner(score_a, score_b),
    )


# ─── Renderers ──────────────────────────────────────────────────────────────


def render_crawl_report(
    results: CrawlResultSet,
    force_refresh: bool,
    requested_url: Optional[str] = None,
    raw: Optional[dict[str, Any]] = None,
) -> str:
    """Summary, numbered image listing, and the raw payload for chaining into other tools.

    ``raw`` is the endpoint body as received and is echoed verbatim when given.
    """
    source = results.source_url or requested_url or UNKNOWN_SOURCE
    lines = [
        f"Successfully crawled {source}",
        "",
        "**Summary:**",
        f"- Found {len(results.images)} product images",
        f"- Generated at: {results.generated_at or UNKNOWN_SOURCE}",
        f"- Force refresh: {str(force_refresh).lower()}",
        "",
        "**Images:**",
    ]
    for i, img in enumerate(results.images, start=1):
        lines.extend([
            "",
            f"{i}. **{img.alt or 'No alt text'}**",
            f"   - URL: {img.url}",
            f"   - Landing page: {img.landing_page}",
            f"   - Hash: {img.hash}",
        ])
    if raw is None:
        raw = results.model_dump(mode="json")
    payload = json.dumps(raw, indent=2, ensure_ascii=False)
    lines.extend(["", "**Raw Data:**", "```json", payload, "```"])
    return "\n".join(lines)


def render_quality(report: QualityReport) -> str:
    lines = [
        f"# Image Quality Analysis for {report.source_url}",
        "",
        "## Overview",
        f"- **Total Images**: {report.total_images}",
        f"- **Images with Alt Text**: {report.images_with_alt} ({report.alt_coverage_pct:.1f}%)",
        f"- **Average Alt Text Length**: {report.average_alt_length:.1f} characters",
        f"- **Overall Quality Score**: {report.overall_score:.1f} / 10",
        "",
        "## Alt Text Quality",
    ]
    for entry in report.images:
        lines.extend([
            "",
            f"### Image {entry.index}",
            f"- **URL**: {entry.url}",
            f"- **Alt Text Length**: {entry.alt_length} characters",
            f"- **Quality Score**: {entry.score} / 10",
            f"- **Alt Text**: {entry.alt or 'No alt text provided'}",
        ])
    lines.extend(["", "## Recommendations"])
    lines.extend(f"- {r}" for r in report.recommendations)
    return "\n".join(lines)


_DIVERSITY_VERDICTS = {
    "excellent": f"{OK} Excellent diversity - very few duplicate images",
    "good": f"{WARN} Good diversity - some duplicate images detected",
    "poor": f"{FAIL} Poor diversity - many duplicate images detected",
}


def render_diversity(report: DiversityReport) -> str:
    lines = [
        f"# Image Diversity Analysis for {report.source_url}",
        "",
        "## Diversity Metrics",
        f"- **Total Images**: {report.total_images}",
        f"- **Unique Hashes**: {report.unique_hashes}",
        f"- **Unique URLs**: {report.unique_urls}",
        f"- **Diversity Score**: {report.diversity_score:.1f}%",
        "",
        "## Analysis",
        _DIVERSITY_VERDICTS[report.rating],
        "",
        "## Image Sources",
    ]
    for entry in report.images:
        lines.extend(["", f"{entry.index}. Landing Page: {entry.landing_page}", f"   Hash: {entry.hash}"])
    return "\n".join(lines)


_MARKETING_VERDICTS = {
    "strong": f"{OK} Strong marketing language",
    "some": f"{WARN} Some marketing elements",
    "weak": f"{FAIL} Weak marketing language",
}


def render_marketing(report: MarketingReport) -> str:
    lines = [
        f"# Marketing Effectiveness Analysis for {report.source_url}",
        "",
        f"## Marketing Score: {report.score:.1f} / 10",
        f"- **Average Keyword Matches**: {report.average_matches:.1f} / {report.keyword_count} per image",
        "",
        "## Individual Image Analysis",
    ]
    for entry in report.images:
        lines.extend([
            "",
            f"### Image {entry.index}",
            f"- **Marketing Score**: {entry.matches} / {report.keyword_count}",
            f"- **URL**: {entry.url}",
            f"- **Alt Text**: {entry.alt or 'No alt text'}",
            f"- **Keywords**: {', '.join(entry.matched_keywords) if entry.matched_keywords else 'none'}",
            f"- **Assessment**: {_MARKETING_VERDICTS[entry.assessment]}",
        ])
    lines.extend(["", "## Recommendations"])
    lines.extend(f"- {r}" for r in report.recommendations)
    return "\n".join(lines)


def render_technical(report: TechnicalReport) -> str:
    lines = [
        f"# Technical Analysis for {report.source_url}",
        "",
        "## Technical Metrics",
        f"- **Total Images**: {report.total_images}",
        f"- **S3 Hosted Images**: {report.s3_images} ({report.s3_pct:.1f}%)",
        f"- **WebP Format**: {report.webp_images} ({report.webp_pct:.1f}%)",
        f"- **Hash Diversity**: {report.hash_prefixes} unique prefixes",
        "",
        "## Image Processing Pipeline",
        f"{OK} Images processed through S3 pipeline" if report.s3_images else f"{FAIL} No S3 processing detected",
        f"{OK} Modern WebP format in use" if report.webp_images else f"{WARN} No WebP format detected",
        "",
        "## URLs",
    ]
    for entry in report.images:
        lines.extend(["", f"{entry.index}. {entry.url}", f"   Hash: {entry.hash}", f"   Format: {entry.format}"])
    return "\n".join(lines)


def render_analysis(report: AnalysisReport) -> str:
    if isinstance(report, QualityReport):
        return render_quality(report)
    if isinstance(report, DiversityReport):
        return render_diversity(report)
    if isinstance(report, MarketingReport):
        return render_marketing(report)
    if isinstance(report, TechnicalReport):
        return render_technical(report)
    raise TypeError(f"Unsupported report: {type(report).__name__}")


# (heading, score label, format for a score, difference unit, tie wording)
_COMPARISON_TEMPLATES = {
    ComparisonType.QUANTITY: ("Quantity Comparison", "Results", "{:.0f} images", "images", "equal number of images"),
    ComparisonType.QUALITY: ("Quality Comparison", "Quality Scores", "{:.1f} / 10", "points", "equal quality scores"),
    ComparisonType.DIVERSITY: ("Diversity Comparison", "Diversity Scores", "{:.1f}%", "%", "equal diversity scores"),
    ComparisonType.MARKETING_EFFECTIVENESS: (
        "Marketing Effectiveness Comparison",
        "Marketing Scores",
        "{:.1f} / 10",
        "points",
        "equal marketing effectiveness",
    ),
}


def render_comparison(result: ComparisonResult) -> str:
    heading, section, score_fmt, unit, tie_text = _COMPARISON_TEMPLATES[result.comparison_type]
    if result.comparison_type == ComparisonType.QUANTITY:
        difference = f"{result.difference:.0f} {unit}"
    elif unit == "%":
        difference = f"{result.difference:.1f}%"
    else:
        difference = f"{result.difference:.1f} {unit}"

    if result.winner == Winner.TIE:
        verdict = f"{HANDSHAKE} Tie - {tie_text}"
    else:
        verdict = f"{TROPHY} {result.winning_label} ({score_fmt.format(result.winning_score)})"

    return "\n".join([
        f"# {heading}",
        "",
        f"## {section}",
        f"- **{result.label_a}**: {score_fmt.format(result.score_a)}",
        f"- **{result.label_b}**: {score_fmt.format(result.score_b)}",
        f"- **Difference**: {difference}",
        "",
        "## Winner",
        verdict,
    ])

from __future__ import annotations

import pytest

from saas_image_crawler.core.models import CrawlResultSet, ImageResult


def make_image(n: int, alt: str = "", url: str | None = None, hash: str | None = None) -> ImageResult:
    return ImageResult(
        url=url or f"https://cdn.example.com/img-{n}.png",
        alt=alt,
        landing_page=f"https://example.com/page-{n}",
        hash=hash or f"{n:02x}deadbeef",
    )


def image_dict(n: int, alt: str = "", url: str | None = None, hash: str | None = None) -> dict:
    return make_image(n, alt=alt, url=url, hash=hash).model_dump()


@pytest.fixture
def result_set() -> CrawlResultSet:
    return CrawlResultSet(
        source_url="https://saas.example.com",
        generated_at="2024-05-01T12:00:00Z",
        images=[
            make_image(1, alt="Analytics dashboard with revenue chart and widget panel"),
            make_image(2, alt="Logo"),
            make_image(3, alt=""),
        ],
    )

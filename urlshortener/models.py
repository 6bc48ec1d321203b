from dataclasses import dataclass, field
from datetime import datetime, UTC


def _utcnow() -> datetime:
    return datetime.now(UTC)


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    target: str                                         # Normalized original URL
    shortcode: str                                      # Unique short identifier of shortened URL
    created_at: datetime = field(default_factory=_utcnow)  # Set once at creation, never mutated


@dataclass(frozen=True)
class VisitModel:
    shortcode: str                                      # Short code of the visited link
    client_tag: str | None = None                       # Optional request metadata (e.g. user agent)
    visited_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ShortURLStatsModel:
    short_url: ShortURLModel                            # Stored short URL record
    visits: int                                         # Number of successful resolutions
# fmt: on

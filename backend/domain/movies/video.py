from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Video:
    """A TMDB video attached to a movie (trailers, teasers, clips)."""

    id: str
    key: str
    name: str = ""
    site: str = ""
    type: str = ""
    official: bool = False
    published_at: str = ""

    @property
    def is_trailer(self) -> bool:
        return self.type == "Trailer"

    @property
    def is_youtube(self) -> bool:
        return self.site == "YouTube"

    @property
    def youtube_url(self) -> Optional[str]:
        if not self.is_youtube or not self.key:
            return None
        return f"https://www.youtube.com/watch?v={self.key}"

    @property
    def thumbnail_url(self) -> Optional[str]:
        if not self.is_youtube or not self.key:
            return None
        return f"https://img.youtube.com/vi/{self.key}/hqdefault.jpg"

    @classmethod
    def from_tmdb(cls, payload: dict[str, Any]) -> "Video":
        if not isinstance(payload, dict):
            raise ValueError("video payload must be an object")
        key = str(payload.get("key") or "").strip()
        if not key:
            raise ValueError("video payload is missing 'key'")
        return cls(
            id=str(payload.get("id") or key),
            key=key,
            name=str(payload.get("name") or "").strip(),
            site=str(payload.get("site") or "").strip(),
            type=str(payload.get("type") or "").strip(),
            official=bool(payload.get("official", False)),
            published_at=str(payload.get("published_at") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "site": self.site,
            "type": self.type,
            "official": self.official,
            "published_at": self.published_at,
            "youtube_url": self.youtube_url,
            "thumbnail_url": self.thumbnail_url,
        }


def select_trailers(videos: Iterable[Video]) -> list[Video]:
    """Playable trailers only: official first, then newest first."""
    trailers = [v for v in videos if v.is_trailer and v.is_youtube]
    # ISO timestamps sort lexicographically.
    trailers.sort(key=lambda v: v.published_at, reverse=True)
    trailers.sort(key=lambda v: not v.official)
    return trailers

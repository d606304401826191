"""Records returned by the CuraQ API and the content reader."""

from dataclasses import dataclass, field


@dataclass
class Article:
    id: str
    title: str
    url: str
    summary: str | None = None
    content: str | None = None
    tags: list = field(default_factory=list)
    reading_time_minutes: int | None = None
    content_type: str | None = None
    priority: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    is_read: bool | None = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            url=data.get("url") or "",
            summary=data.get("summary"),
            content=data.get("content"),
            tags=list(data.get("tags") or []),
            reading_time_minutes=data.get("reading_time_minutes"),
            content_type=data.get("content_type"),
            priority=data.get("priority"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            is_read=data.get("is_read"),
        )


@dataclass
class DiscoveryItem:
    id: str
    title: str
    url: str
    summary: str | None = None
    tags: list = field(default_factory=list)
    reading_time_minutes: int | None = None
    source: str | None = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            url=data.get("url") or "",
            summary=data.get("summary"),
            tags=list(data.get("tags") or []),
            reading_time_minutes=data.get("reading_time_minutes"),
            source=data.get("source"),
        )


@dataclass
class ArticleList:
    articles: list
    total: int | None = None
    page: int | None = None
    page_size: int | None = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            articles=[Article.from_dict(item) for item in data.get("articles") or []],
            total=data.get("total"),
            page=data.get("page"),
            page_size=data.get("pageSize"),
        )


@dataclass
class ReaderContent:
    """Main text of a web page, as extracted for the reader."""

    title: str
    content: str
    text_content: str
    excerpt: str
    byline: str | None = None
    site_name: str | None = None

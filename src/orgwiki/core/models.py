"""Data models for OrgWiki."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WikiPage(BaseModel):
    """A page: one markup file directly under the wiki root."""

    model_config = ConfigDict(frozen=True)

    name: str
    file_path: Path

    @property
    def exists(self) -> bool:
        return self.file_path.is_file()


class AssetDirectory(BaseModel):
    """Directory of files attached to a page, next to the page file."""

    model_config = ConfigDict(frozen=True)

    owner_page_name: str
    dir_path: Path

    @property
    def exists(self) -> bool:
        return self.dir_path.is_dir()


class PageLink(BaseModel):
    """Reference to another page by name (``wiki:<name>``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["page"] = "page"
    name: str


class AssetLink(BaseModel):
    """Reference to a file in a page's asset directory.

    ``file_name`` is None when the link text carried no ``;`` separator;
    such a link points at the asset directory itself.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["asset"] = "asset"
    page_name: str
    file_name: str | None = None

    @property
    def is_directory(self) -> bool:
        return self.file_name is None


class PageHeader(BaseModel):
    """Org keyword lines (``#+TITLE:`` and friends) from the top of a page."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    keywords: list[str] = Field(default_factory=list)
    date: str | None = None


class SearchHit(BaseModel):
    """One result of a page search."""

    name: str
    title: str
    snippet: str
    match_type: Literal["name", "content"]

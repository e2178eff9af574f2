"""Filesystem-backed page store.

Pages are org files directly under the wiki root; each page may own an asset
directory of the same name next to it::

    <root>/Linux.org
    <root>/Linux/manual.pdf

Nothing is cached. Every call reads the filesystem, which stays the single
source of truth.
"""

import logging
import os
import re
import shutil
from datetime import date
from pathlib import Path

from orgwiki.core.errors import InvalidNameError, NotInWikiError
from orgwiki.core.links import ASSET_SEPARATOR, extract_links
from orgwiki.core.models import AssetDirectory, PageHeader, PageLink, SearchHit, WikiPage
from orgwiki.core.paths import (
    DEFAULT_EXTENSION,
    asset_dir,
    deduplicate,
    normalize_path,
    page_name_from_file,
    page_to_file,
    replace_extension,
    same_path,
    select_page_files,
)

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """\
#+TITLE: {title}
#+DESCRIPTION:
#+KEYWORDS:
#+STARTUP: content
#+DATE: {date}

- [[wiki:{index}][Index]]

- Related:

* {title}
"""

SNIPPET_LENGTH = 150


def check_name(name: str) -> str:
    """Reject names that would leave the directory they are created in.

    Raises:
        InvalidNameError: empty, starts with a dot, or contains a path
            separator or the asset link separator.
    """
    if not name:
        raise InvalidNameError(name, "empty")
    if name.startswith("."):
        raise InvalidNameError(name, "starts with a dot")
    for sep in filter(None, (os.sep, os.altsep, "/")):
        if sep in name:
            raise InvalidNameError(name, f"contains {sep!r}")
    if ASSET_SEPARATOR in name:
        raise InvalidNameError(name, f"contains {ASSET_SEPARATOR!r}")
    return name


def _snippet(body: str, query_lower: str) -> str:
    """Body text around the first match, or the start of the body.

    Org headline stars are dropped so the snippet reads as prose.
    """
    text = " ".join(line.lstrip("*").strip() for line in body.splitlines() if line.strip())
    idx = text.lower().find(query_lower)
    if idx < 0:
        return text[:SNIPPET_LENGTH]
    start = max(0, idx - SNIPPET_LENGTH // 3)
    end = min(len(text), start + SNIPPET_LENGTH)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"


class PageStore:
    """Maps page names to page files and asset directories under one root.

    The root is injected; several stores over different roots can coexist
    in one process.
    """

    KEYWORD_PATTERN = re.compile(r"^#\+([A-Za-z_]+):[ \t]*(.*)$")

    def __init__(
        self,
        wiki_root: Path | str,
        extension: str = DEFAULT_EXTENSION,
        index_page: str = "index",
    ):
        self.wiki_root = Path(wiki_root).expanduser()
        self.extension = extension
        self.index_page = index_page

    def __repr__(self) -> str:
        return f"PageStore({str(self.wiki_root)!r}, extension={self.extension!r})"

    def ensure_root(self) -> Path:
        """Create the wiki root if it is missing."""
        self.wiki_root.mkdir(parents=True, exist_ok=True)
        return self.wiki_root

    # ---- pages ----

    def page_to_file(self, name: str) -> Path:
        return page_to_file(self.wiki_root, name, self.extension)

    def page_name_from_file(self, file_path: Path | str) -> str:
        return page_name_from_file(file_path)

    def page(self, name: str) -> WikiPage:
        return WikiPage(name=name, file_path=self.page_to_file(name))

    def page_exists(self, name: str) -> bool:
        return self.page_to_file(name).is_file()

    def page_from_path(self, path: Path | str) -> str:
        """Name of the page stored at ``path``.

        Raises:
            NotInWikiError: ``path`` is not a page file directly under the root.
        """
        candidate = Path(normalize_path(path))
        if (
            not same_path(candidate.parent, self.wiki_root)
            or candidate.suffix != f".{self.extension}"
        ):
            raise NotInWikiError(path, self.wiki_root)
        return page_name_from_file(candidate)

    def html_path(self, name: str) -> Path:
        """Exported HTML file of page ``name``.

        Replaces everything after the first dot, so a dotted page name such
        as ``Node.js`` maps to ``Node.html`` while links and the converter
        use ``Node.js.html``. Dotted page names are not supported by
        ``open_html`` or the server's exported-page detection.
        """
        return Path(replace_extension(self.page_to_file(name), "html"))

    def list_page_files(self) -> list[Path]:
        """Page files directly under the root, sorted by name.

        Editor lock, autosave and backup files are skipped.
        """
        if not self.wiki_root.is_dir():
            return []
        names = [p.name for p in self.wiki_root.iterdir() if p.is_file()]
        return [self.wiki_root / n for n in select_page_files(sorted(names), self.extension)]

    def list_pages(self) -> list[str]:
        return [page_name_from_file(p) for p in self.list_page_files()]

    def create_page(self, name: str, title: str | None = None) -> tuple[WikiPage, bool]:
        """Write a new page from the header template.

        An existing page is never overwritten. Returns ``(page, created)``.

        Raises:
            InvalidNameError: see ``check_name``.
        """
        page = self.page(check_name(name))
        if page.file_path.exists():
            return page, False

        self.ensure_root()
        text = PAGE_TEMPLATE.format(
            title=title or name,
            date=date.today().isoformat(),
            index=self.index_page,
        )
        page.file_path.write_text(text, encoding="utf-8")
        logger.info("Created page %s at %s", name, page.file_path)
        return page, True

    def read_page(self, name: str) -> str | None:
        """Raw page text, or None if the page does not exist."""
        path = self.page_to_file(name)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def _parse_header(self, content: str) -> tuple[PageHeader, str]:
        """Split leading ``#+KEY: value`` lines from the page body.

        Returns (header, body).
        """
        fields: dict[str, object] = {}
        lines = content.splitlines(keepends=True)
        consumed = 0
        for line in lines:
            match = self.KEYWORD_PATTERN.match(line.rstrip("\r\n"))
            if match:
                key = match.group(1).lower()
                value = match.group(2).strip()
                if key == "keywords":
                    fields[key] = [k for k in re.split(r"[,\s]+", value) if k]
                else:
                    fields[key] = value or None
            elif line.strip():
                break
            consumed += 1
        return PageHeader(**fields), "".join(lines[consumed:])

    def read_header(self, name: str) -> PageHeader | None:
        content = self.read_page(name)
        if content is None:
            return None
        header, _ = self._parse_header(content)
        return header

    def linked_pages(self, name: str) -> list[str]:
        """Pages that page ``name`` links to, in first-seen order."""
        content = self.read_page(name) or ""
        return deduplicate(
            link.name for link in extract_links(content) if isinstance(link, PageLink)
        )

    def search_pages(self, query: str) -> list[SearchHit]:
        """Case-insensitive search over page names, titles and body text.

        Name or title hits come first, then body hits, each sorted by name.
        """
        if not query:
            return []

        needle = query.lower()
        hits = []
        for path in self.list_page_files():
            name = page_name_from_file(path)
            header, body = self._parse_header(path.read_text(encoding="utf-8"))
            title = header.title or name
            if needle in name.lower() or needle in title.lower():
                match_type = "name"
            elif needle in body.lower():
                match_type = "content"
            else:
                continue
            hits.append(
                SearchHit(
                    name=name,
                    title=title,
                    snippet=_snippet(body, needle),
                    match_type=match_type,
                )
            )

        hits.sort(key=lambda h: (h.match_type != "name", h.name.lower()))
        return hits

    # ---- assets ----

    def asset_dir(self, page_name: str) -> Path:
        return asset_dir(self.wiki_root, page_name)

    def asset_directory(self, page_name: str) -> AssetDirectory:
        return AssetDirectory(owner_page_name=page_name, dir_path=self.asset_dir(page_name))

    def ensure_asset_dir(self, page_name: str) -> Path:
        """Create the asset directory of ``page_name`` if missing.

        Safe to call repeatedly and from several processes at once; an
        existing directory counts as success.
        """
        path = self.asset_dir(check_name(page_name))
        if not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)
            logger.debug("Created asset directory %s", path)
        return path

    def list_asset_files(self, page_name: str) -> list[str]:
        """Names of the files attached to ``page_name``.

        Creates the asset directory first, so listing a page without assets
        leaves an empty directory behind.
        """
        path = self.ensure_asset_dir(page_name)
        return sorted(p.name for p in path.iterdir())

    def asset_path(self, page_name: str, file_name: str | None = None) -> Path:
        """Path of an asset file, or of the asset directory when no file is given."""
        directory = self.asset_dir(page_name)
        return directory / file_name if file_name else directory

    def asset_exists(self, page_name: str, file_name: str) -> bool:
        return self.asset_path(page_name, file_name).exists()

    def add_asset(self, page_name: str, source: Path | str) -> str:
        """Copy ``source`` into the asset directory of ``page_name``.

        Returns the asset file name.

        Raises:
            InvalidNameError: the file name contains the reserved link
                separator or starts with a dot.
        """
        source = Path(source)
        check_name(source.name)
        target = self.ensure_asset_dir(page_name) / source.name
        shutil.copy2(source, target)
        logger.info("Added asset %s to page %s", source.name, page_name)
        return source.name

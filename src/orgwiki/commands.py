"""Wiki commands for a host application.

Each command composes the page store with the host-supplied capabilities
(page selector, system opener, editor). Cancelled selections return None.
Current-page commands report ``NotInWikiError`` through ``notify`` and
abort without side effects.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from orgwiki.core.errors import NotInWikiError
from orgwiki.core.exporter import HtmlExporter
from orgwiki.core.links import (
    parse_link,
    render_asset_link_markup,
    render_wiki_link_markup,
    resolve_link,
)
from orgwiki.core.models import PageLink
from orgwiki.core.opener import SystemOpener
from orgwiki.core.selector import PageSelector
from orgwiki.core.storage import PageStore

logger = logging.getLogger(__name__)


class WikiCommands:
    def __init__(
        self,
        store: PageStore,
        selector: PageSelector,
        opener: SystemOpener,
        exporter: HtmlExporter | None = None,
        editor: Callable[[Path], None] | None = None,
        notify: Callable[[str], None] | None = None,
    ):
        self.store = store
        self.selector = selector
        self.opener = opener
        self.exporter = exporter
        # Without a host editor, pages go to the default application.
        self.edit = editor or opener.open
        self.notify = notify or logger.info

    def _visit(self, name: str) -> Path:
        page, created = self.store.create_page(name)
        if created:
            self.notify(f"Created page {name}")
        self.edit(page.file_path)
        return page.file_path

    def _choose_page(self, prompt: str = "Page") -> str | None:
        return self.selector.choose_page(self.store.list_pages(), prompt)

    def _current_page(self, current_file: Path | str) -> str | None:
        try:
            return self.store.page_from_path(current_file)
        except NotInWikiError as exc:
            self.notify(str(exc))
            return None

    # ---- pages ----

    def open_index(self) -> Path:
        return self._visit(self.store.index_page)

    def open_page(self, name: str | None = None) -> Path | None:
        """Open ``name`` (or a chosen page), creating it when missing."""
        name = name or self._choose_page("Open page")
        if name is None:
            return None
        return self._visit(name)

    def insert_link(self) -> str | None:
        """Link markup for a chosen page.

        The selector may return a name that is not in the list; the link is
        made anyway and reported as dangling.
        """
        name = self._choose_page("Link to page")
        if name is None:
            return None
        if not self.store.page_exists(name):
            self.notify(f"{name} does not exist yet")
        return render_wiki_link_markup(name)

    def new_page_link(self, name: str | None = None) -> str | None:
        """Create a page and return the markup linking to it."""
        name = name or self.selector.choose_page([], "New page")
        if name is None:
            return None
        _, created = self.store.create_page(name)
        if created:
            self.notify(f"Created page {name}")
        return render_wiki_link_markup(name)

    def follow_link(self, target: str) -> Path | None:
        """Open whatever a scheme-qualified link target points at."""
        link = parse_link(target)
        if link is None:
            return None
        path = resolve_link(self.store, link)
        if isinstance(link, PageLink):
            self.edit(path)
        else:
            self.opener.open(path)
        return path

    def open_root(self) -> Path:
        root = self.store.ensure_root()
        self.opener.open(root)
        return root

    # ---- assets ----

    def insert_asset_link(self, current_file: Path | str) -> str | None:
        """Markup for a chosen asset of the current page."""
        page = self._current_page(current_file)
        if page is None:
            return None
        file_name = self.selector.choose_page(self.store.list_asset_files(page), "Asset")
        if file_name is None:
            return None
        return render_asset_link_markup(page, file_name)

    def add_asset(self, current_file: Path | str, source: Path | str) -> str | None:
        """Copy ``source`` into the current page's assets and return its link."""
        page = self._current_page(current_file)
        if page is None:
            return None
        file_name = self.store.add_asset(page, source)
        return render_asset_link_markup(page, file_name)

    def open_asset(self, page: str | None = None) -> Path | None:
        page = page or self._choose_page("Assets of page")
        if page is None:
            return None
        file_name = self.selector.choose_page(self.store.list_asset_files(page), "Asset")
        if file_name is None:
            return None
        path = self.store.asset_path(page, file_name)
        self.opener.open(path)
        return path

    def open_asset_dir(self, page: str | None = None) -> Path | None:
        page = page or self._choose_page("Assets of page")
        if page is None:
            return None
        path = self.store.ensure_asset_dir(page)
        self.opener.open(path)
        return path

    # ---- export ----

    def open_html(self, current_file: Path | str) -> Path | None:
        """Show the exported HTML of the current page in the browser."""
        page = self._current_page(current_file)
        if page is None:
            return None
        path = self.store.html_path(page)
        if not path.is_file():
            self.notify(f"{page} has not been exported yet")
            return None
        self.opener.open(path)
        return path

    def export_html(self) -> threading.Thread | None:
        """Start exporting every page; completion is reported via ``notify``."""
        if self.exporter is None:
            self.notify("No exporter configured")
            return None

        def done(failures: list[str]) -> None:
            if failures:
                self.notify(f"Export failed for: {', '.join(failures)}")
            else:
                self.notify("Export finished")

        self.notify("Exporting wiki to HTML")
        return self.exporter.export_all(on_done=done)

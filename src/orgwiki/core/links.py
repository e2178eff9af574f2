"""Org link syntax for wiki pages and assets.

Two custom link schemes are used inside page source::

    [[wiki:Linux][Linux]]
    [[wiki-asset-sys:Linux;manual.pdf][manual.pdf]]

Parsing is purely syntactic. Targets are never checked for existence here;
a dangling link only shows up when something tries to open it.

The host markup engine calls back into this module through the
``LinkScheme`` handlers: ``follow`` to get a path to open and ``export`` to
get the markup to emit for an output backend.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from orgwiki.core.models import AssetLink, PageLink

if TYPE_CHECKING:
    from orgwiki.core.storage import PageStore

PAGE_SCHEME = "wiki"
ASSET_SCHEME = "wiki-asset-sys"

# Separates page name from file name in asset links; reserved in both.
ASSET_SEPARATOR = ";"

HTML_BACKEND = "html"

# Pattern for org links: [[target]] or [[target][description]]
ORG_LINK_PATTERN = re.compile(r"\[\[([^\]]+)\](?:\[([^\]]*)\])?\]")


def parse_wiki_link(text: str) -> PageLink:
    """The whole text is the page name."""
    return PageLink(name=text)


def parse_asset_link(text: str) -> AssetLink:
    """Split ``<page>;<file>`` on the first separator.

    Text without a separator is a link to the page's asset directory and
    comes back with ``file_name=None``.
    """
    page_name, sep, file_name = text.partition(ASSET_SEPARATOR)
    if not sep:
        return AssetLink(page_name=page_name)
    return AssetLink(page_name=page_name, file_name=file_name or None)


def parse_link(target: str) -> PageLink | AssetLink | None:
    """Parse a scheme-qualified target. Returns None for foreign schemes."""
    scheme, sep, rest = target.partition(":")
    if not sep:
        return None
    if scheme == PAGE_SCHEME:
        return parse_wiki_link(rest)
    if scheme == ASSET_SCHEME:
        return parse_asset_link(rest)
    return None


def extract_links(content: str) -> list[PageLink | AssetLink]:
    """All wiki and asset links in ``content``, in order of appearance."""
    links = []
    for m in ORG_LINK_PATTERN.finditer(content):
        link = parse_link(m.group(1).strip())
        if link is not None:
            links.append(link)
    return links


def render_wiki_link_markup(name: str) -> str:
    return f"[[{PAGE_SCHEME}:{name}][{name}]]"


def render_asset_link_markup(page_name: str, file_name: str) -> str:
    return f"[[{ASSET_SCHEME}:{page_name}{ASSET_SEPARATOR}{file_name}][{file_name}]]"


def render_exported_page_link(name: str, display_text: str | None = None) -> str:
    return f"<a href='{name}.html'>{display_text or name}</a>"


def render_exported_asset_link(
    page_name: str, file_name: str | None, display_text: str | None = None
) -> str:
    """Anchor to ``<page>/<file>``; without a file name, to ``<page>/``."""
    href = f"{page_name}/{file_name or ''}"
    return f"<a href='{href}'>{display_text or file_name or href}</a>"


def export_page_link(path_text: str, display_text: str | None, backend: str) -> str | None:
    """Export handler for ``wiki:`` links. None suppresses the link."""
    if backend != HTML_BACKEND:
        return None
    return render_exported_page_link(parse_wiki_link(path_text).name, display_text)


def export_asset_link(path_text: str, display_text: str | None, backend: str) -> str | None:
    """Export handler for ``wiki-asset-sys:`` links. None suppresses the link."""
    if backend != HTML_BACKEND:
        return None
    link = parse_asset_link(path_text)
    return render_exported_asset_link(link.page_name, link.file_name, display_text)


def resolve_for_export(target: str, display_text: str | None, backend: str) -> str | None:
    """Markup for a scheme-qualified ``target``, or None to drop it."""
    scheme, _, rest = target.partition(":")
    if scheme == PAGE_SCHEME:
        return export_page_link(rest, display_text, backend)
    if scheme == ASSET_SCHEME:
        return export_asset_link(rest, display_text, backend)
    return None


def rewrite_links_for_export(content: str, backend: str = HTML_BACKEND) -> str:
    """Replace wiki and asset links in page source with ``backend`` snippets.

    Each link becomes an org export snippet (``@@html:<a ...>@@``) so a
    converter that knows nothing about the custom schemes still emits the
    anchors. Suppressed links leave their description as plain text. Links
    with other schemes are kept as they are.
    """

    def replace(m: re.Match) -> str:
        target = m.group(1).strip()
        if parse_link(target) is None:
            return m.group(0)
        markup = resolve_for_export(target, m.group(2), backend)
        if markup is None:
            return m.group(2) or ""
        return f"@@{backend}:{markup}@@"

    return ORG_LINK_PATTERN.sub(replace, content)


def resolve_link(store: "PageStore", link: PageLink | AssetLink) -> Path:
    if isinstance(link, PageLink):
        return store.page_to_file(link.name)
    return store.asset_path(link.page_name, link.file_name)


def resolve_for_open(store: "PageStore", target: str) -> Path | None:
    """Filesystem path a scheme-qualified ``target`` points at.

    Asset links without a file name resolve to the asset directory. Returns
    None for schemes this wiki does not own.
    """
    link = parse_link(target)
    if link is None:
        return None
    return resolve_link(store, link)


@dataclass(frozen=True)
class LinkScheme:
    """Handlers a markup engine registers for one custom link type."""

    name: str
    follow: Callable[[str], Path]
    export: Callable[[str, str | None, str], str | None]


def link_schemes(store: "PageStore") -> dict[str, LinkScheme]:
    """Handlers for both wiki link types, bound to ``store``."""
    return {
        PAGE_SCHEME: LinkScheme(
            name=PAGE_SCHEME,
            follow=lambda path_text: resolve_link(store, parse_wiki_link(path_text)),
            export=export_page_link,
        ),
        ASSET_SCHEME: LinkScheme(
            name=ASSET_SCHEME,
            follow=lambda path_text: resolve_link(store, parse_asset_link(path_text)),
            export=export_asset_link,
        ),
    }

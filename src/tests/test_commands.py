"""Tests for the host-facing wiki commands."""

from unittest.mock import MagicMock

import pytest

from orgwiki.commands import WikiCommands
from orgwiki.core.exporter import HtmlExporter
from orgwiki.core.storage import PageStore


class FakeSelector:
    """Answers prompts from a queue and records what it was offered."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.offered = []

    def choose_page(self, names, prompt="Page"):
        self.offered.append((list(names), prompt))
        return self.answers.pop(0)


class FakeOpener:
    def __init__(self):
        self.opened = []

    def open(self, path):
        self.opened.append(path)


@pytest.fixture
def store(tmp_path):
    return PageStore(tmp_path / "wiki")


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def messages():
    return []


def make_commands(store, opener, messages, *answers, **kwargs):
    return WikiCommands(
        store, FakeSelector(*answers), opener, notify=messages.append, **kwargs
    )


# ============================================================
# Pages
# ============================================================


class TestPageCommands:
    def test_open_index_creates_it(self, store, opener, messages):
        path = make_commands(store, opener, messages).open_index()
        assert path == store.page_to_file("index")
        assert path.exists()
        assert opener.opened == [path]
        assert messages == ["Created page index"]

    def test_open_page_uses_editor(self, store, opener, messages):
        edited = []
        store.create_page("Linux")
        commands = make_commands(store, opener, messages, "Linux", editor=edited.append)
        path = commands.open_page()
        assert edited == [path]
        assert opener.opened == []
        assert messages == []

    def test_open_page_offers_existing_pages(self, store, opener, messages):
        store.create_page("Linux")
        store.create_page("Bash")
        commands = make_commands(store, opener, messages, "Bash")
        commands.open_page()
        assert commands.selector.offered == [(["Bash", "Linux"], "Open page")]

    def test_open_page_cancelled(self, store, opener, messages):
        assert make_commands(store, opener, messages, None).open_page() is None
        assert opener.opened == []
        assert store.list_pages() == []

    def test_insert_link(self, store, opener, messages):
        store.create_page("Linux")
        markup = make_commands(store, opener, messages, "Linux").insert_link()
        assert markup == "[[wiki:Linux][Linux]]"
        assert messages == []

    def test_insert_link_to_missing_page_is_reported(self, store, opener, messages):
        markup = make_commands(store, opener, messages, "Typed").insert_link()
        assert markup == "[[wiki:Typed][Typed]]"
        assert messages == ["Typed does not exist yet"]
        assert not store.page_exists("Typed")

    def test_insert_link_cancelled(self, store, opener, messages):
        assert make_commands(store, opener, messages, None).insert_link() is None

    def test_new_page_link(self, store, opener, messages):
        markup = make_commands(store, opener, messages, "Emacs").new_page_link()
        assert markup == "[[wiki:Emacs][Emacs]]"
        assert store.page_exists("Emacs")

    def test_follow_page_link(self, store, opener, messages):
        edited = []
        commands = make_commands(store, opener, messages, editor=edited.append)
        path = commands.follow_link("wiki:Linux")
        assert edited == [store.page_to_file("Linux")]
        assert path == store.page_to_file("Linux")

    def test_follow_asset_link(self, store, opener, messages):
        commands = make_commands(store, opener, messages)
        commands.follow_link("wiki-asset-sys:Linux;manual.pdf")
        assert opener.opened == [store.asset_path("Linux", "manual.pdf")]

    def test_follow_malformed_asset_link_opens_directory(self, store, opener, messages):
        make_commands(store, opener, messages).follow_link("wiki-asset-sys:Linux")
        assert opener.opened == [store.asset_dir("Linux")]

    def test_follow_foreign_link(self, store, opener, messages):
        assert make_commands(store, opener, messages).follow_link("https://x.org") is None
        assert opener.opened == []

    def test_open_root(self, store, opener, messages):
        path = make_commands(store, opener, messages).open_root()
        assert path.is_dir()
        assert opener.opened == [store.wiki_root]


# ============================================================
# Assets
# ============================================================


class TestAssetCommands:
    def test_insert_asset_link(self, store, opener, messages):
        page, _ = store.create_page("Linux")
        (store.ensure_asset_dir("Linux") / "manual.pdf").write_bytes(b"%PDF")
        commands = make_commands(store, opener, messages, "manual.pdf")
        markup = commands.insert_asset_link(page.file_path)
        assert markup == "[[wiki-asset-sys:Linux;manual.pdf][manual.pdf]]"
        assert commands.selector.offered == [(["manual.pdf"], "Asset")]

    def test_insert_asset_link_outside_wiki(self, store, opener, messages, tmp_path):
        commands = make_commands(store, opener, messages)
        assert commands.insert_asset_link(tmp_path / "elsewhere.org") is None
        assert "is not a page of the wiki" in messages[0]
        assert not store.asset_dir("elsewhere").exists()

    def test_add_asset(self, store, opener, messages, tmp_path):
        page, _ = store.create_page("Linux")
        source = tmp_path / "photo.jpg"
        source.write_bytes(b"jpg")
        markup = make_commands(store, opener, messages).add_asset(page.file_path, source)
        assert markup == "[[wiki-asset-sys:Linux;photo.jpg][photo.jpg]]"
        assert store.asset_exists("Linux", "photo.jpg")

    def test_add_asset_outside_wiki(self, store, opener, messages, tmp_path):
        source = tmp_path / "photo.jpg"
        source.write_bytes(b"jpg")
        commands = make_commands(store, opener, messages)
        assert commands.add_asset(tmp_path / "notes.txt", source) is None
        assert messages

    def test_open_asset(self, store, opener, messages):
        store.create_page("Linux")
        (store.ensure_asset_dir("Linux") / "manual.pdf").write_bytes(b"%PDF")
        path = make_commands(store, opener, messages, "Linux", "manual.pdf").open_asset()
        assert path == store.asset_path("Linux", "manual.pdf")
        assert opener.opened == [path]

    def test_open_asset_cancelled_at_file(self, store, opener, messages):
        store.create_page("Linux")
        assert make_commands(store, opener, messages, None).open_asset("Linux") is None
        assert opener.opened == []

    def test_open_asset_dir_creates_it(self, store, opener, messages):
        path = make_commands(store, opener, messages).open_asset_dir("Linux")
        assert path.is_dir()
        assert opener.opened == [path]


# ============================================================
# Export
# ============================================================


class TestExportCommands:
    def test_open_html(self, store, opener, messages):
        page, _ = store.create_page("Linux")
        store.html_path("Linux").write_text("<html/>")
        path = make_commands(store, opener, messages).open_html(page.file_path)
        assert path == store.html_path("Linux")
        assert opener.opened == [path]

    def test_open_html_not_exported(self, store, opener, messages):
        page, _ = store.create_page("Linux")
        assert make_commands(store, opener, messages).open_html(page.file_path) is None
        assert messages == ["Linux has not been exported yet"]
        assert opener.opened == []

    def test_open_html_outside_wiki(self, store, opener, messages, tmp_path):
        assert make_commands(store, opener, messages).open_html(tmp_path / "x.org") is None
        assert len(messages) == 1

    def test_export_without_exporter(self, store, opener, messages):
        assert make_commands(store, opener, messages).export_html() is None
        assert messages == ["No exporter configured"]

    def test_export_reports_failures(self, store, opener, messages):
        exporter = MagicMock()
        commands = make_commands(store, opener, messages, exporter=exporter)
        commands.export_html()
        on_done = exporter.export_all.call_args.kwargs["on_done"]
        on_done(["Broken"])
        assert messages == ["Exporting wiki to HTML", "Export failed for: Broken"]

    def test_export_reports_success(self, store, opener, messages):
        exporter = MagicMock()
        commands = make_commands(store, opener, messages, exporter=exporter)
        commands.export_html()
        exporter.export_all.call_args.kwargs["on_done"]([])
        assert messages[-1] == "Export finished"

    def test_export_reports_bad_command(self, store, opener, messages):
        store.create_page("Linux")
        exporter = HtmlExporter(store, ["true", '(setq css "body{margin:0}")', "{file}"])
        commands = make_commands(store, opener, messages, exporter=exporter)
        commands.export_html().join(timeout=30)
        assert messages == ["Exporting wiki to HTML", "Export failed for: Linux"]

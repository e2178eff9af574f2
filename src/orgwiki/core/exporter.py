"""HTML export through an external converter process.

The converter (by default a batch Emacs running the org HTML exporter) is
configured as an argv template. ``{file}``, ``{name}`` and ``{root}`` are
substituted per page; literal braces are written ``{{`` and ``}}``.

The converter never sees the custom link schemes. It is run on a staged
copy of the page in which every wiki and asset link has already been
replaced by its HTML anchor, and the HTML it writes next to that copy is
moved into the wiki root.
"""

import logging
import shutil
import subprocess
import tempfile
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from orgwiki.core.errors import ExportCommandError, ExportError
from orgwiki.core.links import HTML_BACKEND, rewrite_links_for_export
from orgwiki.core.storage import PageStore

logger = logging.getLogger(__name__)


class HtmlExporter:
    """Runs the converter for one page or for the whole wiki."""

    def __init__(self, store: PageStore, command: Sequence[str]):
        self.store = store
        self.command = list(command)

    def build_command(self, name: str, source: Path | None = None) -> list[str]:
        """Fill the argv template for page ``name``.

        ``source`` replaces the page file as ``{file}``.

        Raises:
            ExportCommandError: an argument has an unknown or unbalanced
                placeholder.
        """
        values = {
            "file": str(source or self.store.page_to_file(name)),
            "name": name,
            "root": str(self.store.wiki_root),
        }
        argv = []
        for arg in self.command:
            try:
                argv.append(arg.format(**values))
            except (KeyError, IndexError, ValueError) as exc:
                raise ExportCommandError(arg, exc) from exc
        return argv

    def export_page(self, name: str) -> Path:
        """Export one page and wait for the converter.

        Returns:
            Path of the exported HTML file.

        Raises:
            ExportError: the converter exited with a non-zero status.
            ExportCommandError: the argv template is malformed.
            OSError: the page could not be read or the converter not started.
        """
        page_file = self.store.page_to_file(name)
        content = page_file.read_text(encoding="utf-8")

        with tempfile.TemporaryDirectory(prefix="orgwiki-export-") as workdir:
            staged = Path(workdir) / page_file.name
            staged.write_text(rewrite_links_for_export(content, HTML_BACKEND), encoding="utf-8")
            argv = self.build_command(name, staged)

            logger.info("Exporting %s", name)
            result = subprocess.run(
                argv,
                cwd=self.store.wiki_root,
                capture_output=True,
                text=True,
            )
            if result.returncode != 0:
                raise ExportError(name, result.returncode, result.stderr or result.stdout)

            # Keep the converter's own output name; links point at <name>.html.
            produced = staged.with_suffix(".html")
            if not produced.exists():
                return self.store.html_path(name)
            target = self.store.wiki_root / produced.name
            shutil.move(produced, target)
        logger.debug("Wrote %s", target)
        return target

    def export_pages(self, names: Sequence[str]) -> list[str]:
        """Export each page in turn. Returns the names that failed.

        A failing page never stops the others.
        """
        failures = []
        for name in names:
            try:
                self.export_page(name)
            except ExportError as exc:
                logger.warning("%s\n%s", exc, exc.output.strip())
                failures.append(name)
            except Exception:
                logger.exception("Could not export %s", name)
                failures.append(name)
        return failures

    def export_all(
        self, on_done: Callable[[list[str]], None] | None = None
    ) -> threading.Thread:
        """Export every page in a background thread.

        ``on_done`` receives the list of failed page names once the last
        converter process has exited. The caller is not blocked.
        """
        names = self.store.list_pages()

        def run() -> None:
            failures = list(names)
            try:
                failures = self.export_pages(names)
                logger.info(
                    "Export finished: %d pages, %d failed", len(names), len(failures)
                )
            finally:
                if on_done is not None:
                    on_done(failures)

        thread = threading.Thread(target=run, name="orgwiki-export", daemon=True)
        thread.start()
        return thread

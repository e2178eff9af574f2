"""``orgwiki`` command-line interface."""

import argparse
import logging
import sys

from orgwiki.commands import WikiCommands
from orgwiki.config import Settings
from orgwiki.core.errors import OrgWikiError
from orgwiki.core.exporter import HtmlExporter
from orgwiki.core.links import render_asset_link_markup, render_wiki_link_markup
from orgwiki.core.opener import get_opener
from orgwiki.core.selector import PromptSelector
from orgwiki.core.storage import PageStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orgwiki", description="Desktop org-mode wiki")
    parser.add_argument("--root", help="wiki root directory (overrides config)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list page names")

    p = sub.add_parser("path", help="print the file of a page")
    p.add_argument("name")

    p = sub.add_parser("new", help="create a page from the template")
    p.add_argument("name")
    p.add_argument("--title")

    p = sub.add_parser("link", help="print link markup for a page or asset")
    p.add_argument("name")
    p.add_argument("--asset", help="asset file name")

    p = sub.add_parser("assets", help="list the asset files of a page")
    p.add_argument("name")

    p = sub.add_parser("open", help="open a page (chosen interactively if omitted)")
    p.add_argument("name", nargs="?")

    sub.add_parser("index", help="open the index page")
    sub.add_parser("dir", help="open the wiki root in the file manager")

    p = sub.add_parser("search", help="search page names and text")
    p.add_argument("query")

    p = sub.add_parser("export", help="export pages to HTML")
    p.add_argument("name", nargs="?", help="single page (default: all pages)")

    sub.add_parser("serve", help="serve the exported wiki over HTTP")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {"wiki_root": args.root} if args.root else {}
    cfg = Settings(**overrides)
    logging.basicConfig(
        level=logging.DEBUG if cfg.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = PageStore(cfg.wiki_root, cfg.extension, cfg.index_page)
    exporter = HtmlExporter(store, cfg.export_command)
    commands = WikiCommands(
        store, PromptSelector(), get_opener(), exporter=exporter, notify=print
    )

    try:
        return _dispatch(args, cfg, store, exporter, commands)
    except (OrgWikiError, OSError) as exc:
        print(f"orgwiki: {exc}", file=sys.stderr)
        return 1


def _dispatch(args, cfg, store, exporter, commands) -> int:
    if args.command == "list":
        for name in store.list_pages():
            print(name)
    elif args.command == "path":
        print(store.page_to_file(args.name))
    elif args.command == "new":
        page, created = store.create_page(args.name, title=args.title)
        if not created:
            print(f"{args.name} already exists", file=sys.stderr)
        print(page.file_path)
    elif args.command == "link":
        if args.asset:
            print(render_asset_link_markup(args.name, args.asset))
        else:
            print(render_wiki_link_markup(args.name))
    elif args.command == "assets":
        for file_name in store.list_asset_files(args.name):
            print(file_name)
    elif args.command == "open":
        commands.open_page(args.name)
    elif args.command == "index":
        commands.open_index()
    elif args.command == "dir":
        commands.open_root()
    elif args.command == "search":
        for hit in store.search_pages(args.query):
            print(f"{hit.name}\t{hit.snippet}")
    elif args.command == "export":
        if args.name:
            print(exporter.export_page(args.name))
        else:
            failures: list[str] = []
            # The interpreter would exit under the worker thread, so wait here.
            exporter.export_all(on_done=failures.extend).join()
            if failures:
                print(f"Export failed for: {', '.join(failures)}", file=sys.stderr)
                return 1
    elif args.command == "serve":
        import uvicorn

        from orgwiki.server import create_app

        uvicorn.run(create_app(cfg), host=cfg.server_host, port=cfg.server_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())

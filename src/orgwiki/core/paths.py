"""Pure path and page-name helpers.

Everything here works on strings and ``os.PathLike`` values without touching
the filesystem. Paths are compared by their normalized string form.
"""

import os
import re
from collections.abc import Hashable, Iterable
from pathlib import Path
from typing import TypeVar

DEFAULT_EXTENSION = "org"

# Editor lock, autosave and backup artifacts.
TRANSIENT_PREFIXES = (".#", "#")
TRANSIENT_SUFFIXES = ("#", "~")

_DOUBLE_SEP_RE = re.compile(re.escape(os.sep) + "{2,}")

T = TypeVar("T", bound=Hashable)


def path_join(base: str | os.PathLike, rel: str | os.PathLike) -> str:
    """Join ``base`` and ``rel`` with exactly one separator between them."""
    return os.fspath(base).rstrip(os.sep) + os.sep + os.fspath(rel).lstrip(os.sep)


def normalize_path(path: str | os.PathLike) -> str:
    """Absolute form with doubled separators collapsed and no trailing one.

    Two paths are the same wiki location iff their normalized forms are
    equal. The comparison is case- and encoding-sensitive.
    """
    text = os.path.abspath(os.path.expanduser(os.fspath(path)))
    text = _DOUBLE_SEP_RE.sub(os.sep, text)
    if len(text) > 1 and text.endswith(os.sep):
        text = text[:-1]
    return text


def same_path(a: str | os.PathLike, b: str | os.PathLike) -> bool:
    return normalize_path(a) == normalize_path(b)


def page_name_from_file(file_path: str | os.PathLike) -> str:
    """Base name of ``file_path`` without its directory and extension."""
    return os.path.splitext(os.path.basename(os.fspath(file_path)))[0]


def page_to_file(
    wiki_root: str | os.PathLike, name: str, extension: str = DEFAULT_EXTENSION
) -> Path:
    """File holding page ``name``: ``<wiki_root>/<name>.<extension>``."""
    return Path(path_join(wiki_root, f"{name}.{extension}"))


def asset_dir(wiki_root: str | os.PathLike, page_name: str) -> Path:
    """Asset directory of ``page_name``: ``<wiki_root>/<page_name>/``."""
    return Path(path_join(wiki_root, page_name))


def replace_extension(file_path: str | os.PathLike, new_ext: str) -> str:
    """Swap everything after the first ``.`` of the file name for ``new_ext``.

    The split is anchored on the first dot, so ``file.v1.org`` becomes
    ``file.html``, not ``file.v1.html``. Directory components are kept.
    """
    head, name = os.path.split(os.fspath(file_path))
    stem = name.split(".", 1)[0]
    return os.path.join(head, f"{stem}.{new_ext}") if head else f"{stem}.{new_ext}"


def is_transient_file(name: str) -> bool:
    """True for editor lock/backup/autosave files such as ``#Page.org#``."""
    return name.startswith(TRANSIENT_PREFIXES) or name.endswith(TRANSIENT_SUFFIXES)


def select_page_files(
    names: Iterable[str], extension: str = DEFAULT_EXTENSION
) -> list[str]:
    """Keep the page files among ``names``, in their original order."""
    suffix = f".{extension}"
    return [n for n in names if n.endswith(suffix) and not is_transient_file(n)]


def deduplicate(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))

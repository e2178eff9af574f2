"""Exceptions raised by OrgWiki."""

from pathlib import Path


class OrgWikiError(Exception):
    """Base class for wiki errors meant to be shown to the user."""


class NotInWikiError(OrgWikiError):
    """A current-page operation was invoked on a file outside the wiki root."""

    def __init__(self, path: Path | str, wiki_root: Path | str):
        self.path = Path(path)
        self.wiki_root = Path(wiki_root)
        super().__init__(f"{self.path} is not a page of the wiki at {self.wiki_root}")


class ExportError(OrgWikiError):
    """The external HTML converter exited with a non-zero status."""

    def __init__(self, page_name: str, returncode: int, output: str = ""):
        self.page_name = page_name
        self.returncode = returncode
        self.output = output
        super().__init__(f"Export of {page_name!r} failed with exit code {returncode}")


class ExportCommandError(OrgWikiError):
    """The configured converter command is not a valid argv template."""

    def __init__(self, argument: str, reason: Exception):
        self.argument = argument
        super().__init__(
            f"Bad export command argument {argument!r} ({reason!r}); "
            "write literal braces as {{ and }}"
        )


class InvalidNameError(OrgWikiError, ValueError):
    """A page or asset name that cannot live directly in its directory."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Invalid name {name!r}: {reason}")

"""Open files and directories with the desktop's default application."""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class SystemOpener(Protocol):
    def open(self, path: Path | str) -> None:
        """Hand ``path`` to the default application and return immediately."""
        ...


class CommandOpener:
    """Runs ``<command> <path>`` detached from this process."""

    command: tuple[str, ...] = ()

    def open(self, path: Path | str) -> None:
        argv = [*self.command, str(path)]
        logger.debug("Opening %s with %s", path, argv[0])
        subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )


class XdgOpener(CommandOpener):
    command = ("xdg-open",)


class MacOpener(CommandOpener):
    command = ("open",)


class WindowsOpener:
    def open(self, path: Path | str) -> None:
        logger.debug("Opening %s with os.startfile", path)
        os.startfile(str(path))  # type: ignore[attr-defined]


def get_opener(platform: str | None = None) -> SystemOpener:
    """Opener backend for ``platform`` (defaults to ``sys.platform``)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsOpener()
    if platform == "darwin":
        return MacOpener()
    return XdgOpener()

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED_ATTR = "_sigao_configured"


def configure_logging(level: str | int = logging.INFO, log_file: Path | None = None) -> None:
    """Configure root logging once per process.

    Console records go to stderr through rich so they do not mix with command
    output; ``log_file`` adds a plain timestamped file handler.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, _CONFIGURED_ATTR, False):
        return

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        root.addHandler(file_handler)

    setattr(root, _CONFIGURED_ATTR, True)
    logging.getLogger(__name__).debug("Logging initialized (level=%s, file=%s)", level, log_file)

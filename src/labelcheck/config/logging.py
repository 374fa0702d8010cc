"""Shared logging helpers for labelcheck."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: INFO level by default
    and a terse format suitable for CLI output. Log records go to stderr so JSON written to
    stdout stays machine readable. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO; a cold cache issues one per page.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

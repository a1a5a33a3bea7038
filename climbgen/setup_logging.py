import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the service.

    Messages go to stdout with timestamp, level and origin; our own
    packages log at ``level`` while the web server stays at WARNING.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("climbgen").setLevel(resolved)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

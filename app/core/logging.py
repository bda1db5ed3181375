import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(processName)s] %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level if isinstance(level, int) else level.upper())

    if not any(getattr(h, "_vigenere_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._vigenere_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

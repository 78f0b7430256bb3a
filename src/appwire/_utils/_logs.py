import logging
import sys

logger: logging.Logger = logging.getLogger("appwire")


def setup_logging(should_debug: bool = False) -> None:
    """Attach a stream handler to the package logger.

    Calling it more than once does not stack handlers.
    """
    if not any(getattr(h, "_appwire", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handler._appwire = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if should_debug else logging.INFO)

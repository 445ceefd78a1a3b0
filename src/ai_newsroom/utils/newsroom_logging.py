import logging


def setup_logging(level: int = logging.INFO):
    """Configure logging for CLI usage."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    # Provider SDKs are chatty at INFO (one line per HTTP request)
    for noisy in ("httpx", "openai", "urllib3"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


def parse_log_level(name: str) -> int:
    """Translate a level name such as 'debug' into a logging constant."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level

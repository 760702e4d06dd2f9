import logging
import re
from io import StringIO

import pydantic
from colorlog import ColoredFormatter
from rich.console import Console
from rich.pretty import Pretty


class PrettyReprFormatter(ColoredFormatter):
    """
    Colored formatter that renders pydantic models and containers with rich
    instead of their default repr.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.string_console = Console(highlight=False, width=120, file=StringIO())

    def _render(self, obj) -> str:
        if isinstance(obj, pydantic.BaseModel):
            obj = {"model": obj.__class__.__name__, **obj.model_dump()}
        self.string_console.file = StringIO()
        self.string_console.print(Pretty(obj))
        return self.string_console.file.getvalue().strip()

    def format(self, record):
        if not isinstance(record.msg, str | int | float | bool | type(None)):
            try:
                record.msg = self._render(record.msg)
            except Exception:
                record.msg = repr(record.msg)

        # Shorten pathname to start from 'echocatering/'
        match = re.search(r"(echocatering/.*?)$", record.pathname or "")
        if match:
            record.pathname = match.group(1)

        return super().format(record)


def setup_logging(name=None, level="INFO"):
    """
    Set up the ``echocatering`` application logger with a colored level name,
    a package-relative path and bold line numbers.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("echocatering")
    logger.setLevel(numeric_level)
    logger.propagate = True

    # Remove any existing handlers to avoid duplicates
    if logger.handlers:
        logger.handlers = []

    formatter = PrettyReprFormatter(
        "%(asctime)s - %(log_color)s%(levelname)s%(reset)s - %(pathname)s:%(bold)s%(lineno)d%(reset)s - %(bold)s%(funcName)s%(reset)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        reset=True,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={
            "bold": {
                "DEBUG": "bold",
                "INFO": "bold",
                "WARNING": "bold",
                "ERROR": "bold",
                "CRITICAL": "bold",
            }
        },
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger

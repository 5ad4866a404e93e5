import logging
import sys


class ContextFormatter(logging.Formatter):
    """Custom formatter that handles optional session_id and step fields."""
    def format(self, record):
        if not hasattr(record, 'session_id'):
            record.session_id = '-'
        if not hasattr(record, 'step'):
            record.step = '-'
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [session_id=%(session_id)s step=%(step)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level.upper(),
        handlers=[handler],
    )

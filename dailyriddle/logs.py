import json
import logging
from datetime import datetime, timezone

FORWARDED_FIELDS = ["user_id", "riddle_id", "assigned_date"]

QUIET_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in FORWARDED_FIELDS:
            if hasattr(record, field):
                log_record[field] = str(getattr(record, field))

        if record.exc_info:
            log_record["stack"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def setup_logging(level: str = "INFO", as_json: bool = False) -> None:
    """
    Uygulama log ayarı:
    - uygulama logları: LOG_LEVEL
    - SQLAlchemy logları: WARNING+ (sorgu gürültüsü yok)
    """
    handler = logging.StreamHandler()
    if as_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

import logging
import sys

# atributos que todo LogRecord já tem; o resto veio de `extra=`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "extra"}


class SafeExtraFormatter(logging.Formatter):
    """
    Formatter que junta os campos passados em `extra=` num dict
    e não quebra quando o registro não tem nenhum.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.extra = {
            k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS
        }
        return super().format(record)


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)

    formatter = SafeExtraFormatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s | %(extra)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()
    root.addHandler(handler)

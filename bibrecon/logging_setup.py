import logging, os, json, sys

def get_logger(name: str) -> logging.LoggerAdapter:
    logger = logging.getLogger(name)
    if not logger.handlers:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s | extras=%(extras)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)
    # default extras
    return logging.LoggerAdapter(logger, extra={"extras": "{}"})

def with_extras(logger: logging.Logger, **extras) -> logging.LoggerAdapter:
    # attach JSON extras for consistent structured logs
    return logging.LoggerAdapter(logger.logger if hasattr(logger, "logger") else logger,
                                 extra={"extras": json.dumps(extras, ensure_ascii=False, default=str)})

# Python Imports
import logging
import logging.config
import pathlib
from typing import Optional, cast

import yaml

# Project Imports

DEFAULT_LOGGER_CONFIG = pathlib.Path(__file__).parent.resolve() / "logger_config.yaml"


class TraceLogger(logging.Logger):
    TRACE = 5

    def trace(self, msg, *args, **kwargs) -> None:
        if self.isEnabledFor(self.TRACE):
            self._log(self.TRACE, msg, args, **kwargs)


# Register level name and custom class BEFORE dictConfig/getLogger
logging.addLevelName(TraceLogger.TRACE, "TRACE")
logging.setLoggerClass(TraceLogger)


def configure_logging(config_path: Optional[pathlib.Path] = None, level: Optional[str] = None) -> None:
    with open(config_path or DEFAULT_LOGGER_CONFIG, "r") as f:
        config = yaml.safe_load(f)

    if level is not None:
        config.setdefault("loggers", {}).setdefault("solana_rpc", {})["level"] = level.upper()

    logging.config.dictConfig(config)


def get_logger(name: str) -> TraceLogger:
    return cast(TraceLogger, logging.getLogger(name))

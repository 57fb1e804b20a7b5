import logging
import os
import socket
from contextvars import ContextVar
from uuid import UUID

from pythonjsonlogger import jsonlogger

REQUEST_GUID: ContextVar[str] = ContextVar("request_guid", default=str(UUID(int=0)))
REQUEST_METHOD: ContextVar[str] = ContextVar("request_method", default="N/A")


class APIJsonLogFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["app"] = os.environ.get("APP_NAME", "quote-sync")
        log_record["level"] = record.levelname
        log_record["file_name"] = record.filename
        log_record["func_name"] = record.funcName
        log_record["line_no"] = record.lineno
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["message"] = record.getMessage()
        log_record["host_name"] = socket.gethostname()
        log_record["trace_id"] = getattr(record, "guid", "N/A")
        log_record["method_name"] = getattr(record, "method", "N/A")
        log_record["env"] = os.environ.get("ENV", "DEV")


class RequestGUIDFilter(logging.Filter):
    def filter(self, record):
        record.guid = REQUEST_GUID.get()
        record.method = REQUEST_METHOD.get()
        return True


def setup_logger(
    logger_name=os.environ.get("APP_LOGGER", "DEFAULT"),
    level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
):
    def create_api_logger():
        j_logger = logging.getLogger(logger_name)
        j_logger.setLevel(level)
        j_logger.propagate = False

        json_handler = logging.StreamHandler()
        json_handler.setFormatter(APIJsonLogFormatter())

        j_logger.addFilter(RequestGUIDFilter())
        j_logger.addHandler(json_handler)
        return j_logger

    def create_default_logger():
        d_logger = logging.getLogger(logger_name)
        d_logger.setLevel(level)
        d_logger.propagate = False
        d_logger.addFilter(RequestGUIDFilter())
        console_formatter = logging.Formatter(
            "%(asctime)-10s | %(levelname)-7s | %(guid)s | %(filename)s | %(lineno)d | %(message)-s"
        )
        std_out_handler = logging.StreamHandler()
        std_out_handler.setFormatter(console_formatter)
        d_logger.addHandler(std_out_handler)
        return d_logger

    if logger_name in logging.Logger.manager.loggerDict:
        return logging.getLogger(logger_name)

    match logger_name:
        case "API":
            logger = create_api_logger()
        case _:
            logger = create_default_logger()

    return logger

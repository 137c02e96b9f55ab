from .log import StructuredFormatter, bind, log_error, setup_logging

__all__ = ["StructuredFormatter", "bind", "log_error", "setup_logging"]

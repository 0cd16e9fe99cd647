"""
clog - Small leveled logging facility

Writes printf-style messages to one destination, with optional header
decorations and filtering by severity.

Provides:
- Eight ordered levels (TRACE to FATAL) and a filter level
- Header decorations: time, source file and line, function, ANSI colors
- Output formats: plain text, XML, tab-separated values, JSON
- Optional lock hooks for multi-threaded programs
- Configuration from a YAML file and environment variables

Usage:
    import clog

    clog.set_filter_level(clog.LogLevel.INFO)
    clog.warning("disk at %d%%", 91)  # WARNING -- disk at 91%
    clog.debug("x=%d", 1)  # filtered out

    # Document formats are bracketed by initialize/terminate
    clog.initialize_to_file("app.json", clog.InitMode.TRUNCATE, clog.OutputFormat.JSON, clog.OutputAttribute.TIME)
    clog.info("started")
    clog.terminate()

Configuration:
    # Via environment variables
    export CLOG_LEVEL=DEBUG
    export CLOG_FORMAT=csv
    export CLOG_FILE=/var/log/app/app.log

    # Via configuration file
    from clog.config import LoggingConfig
    LoggingConfig.setup_logging(config_path="clog_config.yml")
"""

from clog._version import __version__
from clog.classifier import is_blank, starts_with_newline
from clog.destination import Destination
from clog.exceptions import ClogError, OutputFormatLockedError, StreamLockedError
from clog.levels import InitMode, LogLevel, OutputAttribute, OutputFormat

__all__ = [
    "__version__",
    "Destination",
    "LogLevel",
    "OutputAttribute",
    "OutputFormat",
    "InitMode",
    "ClogError",
    "OutputFormatLockedError",
    "StreamLockedError",
    "is_blank",
    "starts_with_newline",
    "get_destination",
    "set_stream",
    "get_stream",
    "set_filter_level",
    "get_filter_level",
    "get_filter_name",
    "set_output_attributes",
    "get_output_attributes",
    "set_output_format",
    "get_output_format",
    "set_time_format",
    "get_time_format",
    "set_lock",
    "set_unlock",
    "set_lock_userdata",
    "get_lock_userdata",
    "set_lock_handle",
    "initialize",
    "initialize_to_default",
    "initialize_to_file",
    "terminate",
    "log",
    "vlog",
    "trace",
    "debug",
    "verbose",
    "info",
    "notice",
    "warning",
    "error",
    "fatal",
]

_destination = Destination()


def get_destination() -> Destination:
    """
    Get the destination shared by the module-level functions.

    Example:
        dest = clog.get_destination()
        dest.set_lock_handle(threading.Lock())
    """
    return _destination


set_stream = _destination.set_stream
get_stream = _destination.get_stream
set_filter_level = _destination.set_filter_level
get_filter_level = _destination.get_filter_level
get_filter_name = _destination.get_filter_name
set_output_attributes = _destination.set_output_attributes
get_output_attributes = _destination.get_output_attributes
set_output_format = _destination.set_output_format
get_output_format = _destination.get_output_format
set_time_format = _destination.set_time_format
get_time_format = _destination.get_time_format
set_lock = _destination.set_lock
set_unlock = _destination.set_unlock
set_lock_userdata = _destination.set_lock_userdata
get_lock_userdata = _destination.get_lock_userdata
set_lock_handle = _destination.set_lock_handle
initialize = _destination.initialize
initialize_to_default = _destination.initialize_to_default
initialize_to_file = _destination.initialize_to_file
terminate = _destination.terminate
log = _destination.log
vlog = _destination.vlog


# The leveled functions report the caller of the function, one frame above
# the bound Destination method.


def trace(message: str, *args):
    _destination.trace(message, *args, stacklevel=2)


def debug(message: str, *args):
    _destination.debug(message, *args, stacklevel=2)


def verbose(message: str, *args):
    _destination.verbose(message, *args, stacklevel=2)


def info(message: str, *args):
    _destination.info(message, *args, stacklevel=2)


def notice(message: str, *args):
    _destination.notice(message, *args, stacklevel=2)


def warning(message: str, *args):
    _destination.warning(message, *args, stacklevel=2)


def error(message: str, *args):
    _destination.error(message, *args, stacklevel=2)


def fatal(message: str, *args):
    _destination.fatal(message, *args, stacklevel=2)

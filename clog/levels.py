"""
Levels, output attributes and output formats.

Severity levels are plain ascending integers so that filtering is a numeric
comparison:

    message.level >= filter_level  ->  message is written

ALL and NONE are aliases meant for the filter only: ALL lets everything
through, NONE only lets FATAL messages through.
"""

from enum import Enum, IntEnum, IntFlag
from beartype.typing import Iterable, Union


class LogLevel(IntEnum):
    """Priority of a log message, from least to most severe"""

    TRACE = 0
    DEBUG = 1
    VERBOSE = 2
    INFO = 3
    NOTICE = 4
    WARNING = 5
    ERROR = 6
    FATAL = 7

    # Filter aliases
    ALL = 0
    NONE = 7

    @classmethod
    def parse(cls, value: Union["LogLevel", int, str]) -> "LogLevel":
        """
        Convert a level, a level number or a level name into a LogLevel.

        Args:
            value: LogLevel member, integer value or case-insensitive name (aliases included)

        Returns:
            Matching LogLevel

        Raises:
            ValueError: if the value does not name a level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls.__members__[name]
            raise ValueError(f"Invalid log level: {value}. Must be one of: {', '.join(level_names())}")
        return cls(value)


def level_names() -> list:
    """Display names of the levels, from least to most severe"""
    return [level.name for level in LogLevel]


# ANSI SGR parameters used when OutputAttribute.COLORED is set
COLOR_CODES = {
    LogLevel.TRACE: "37",  # white
    LogLevel.DEBUG: "34",  # blue
    LogLevel.VERBOSE: "36",  # cyan
    LogLevel.INFO: "32",  # green
    LogLevel.NOTICE: "33",  # yellow
    LogLevel.WARNING: "35",  # magenta
    LogLevel.ERROR: "31",  # red
    LogLevel.FATAL: "1;31",  # bold red
}

COLOR_RESET = "\x1b[0m"


def color_start(level: LogLevel) -> str:
    return f"\x1b[{COLOR_CODES[level]}m"


class OutputAttribute(IntFlag):
    """Decorations added to the header of each message"""

    MINIMAL = 0x0
    TIME = 0x1
    FILE = 0x2
    FUNC = 0x4
    COLORED = 0x10
    VERBOSE = TIME | FILE | FUNC

    @classmethod
    def parse(cls, names: Union["OutputAttribute", int, str, Iterable[str]]) -> "OutputAttribute":
        """
        Build an attribute set from names.

        Args:
            names: an OutputAttribute, an int, a comma-separated string ("time,file")
                or an iterable of names

        Returns:
            The OR of all named attributes (MINIMAL when empty)

        Raises:
            ValueError: on an unknown attribute name
        """
        if isinstance(names, int):
            return cls(names)
        if isinstance(names, str):
            names = names.split(",")
        attrs = cls.MINIMAL
        for name in names:
            name = name.strip().upper()
            if not name:
                continue
            if name not in cls.__members__:
                valid = ", ".join(member.lower() for member in cls.__members__)
                raise ValueError(f"Invalid output attribute: {name.lower()}. Must be one of: {valid}")
            attrs |= cls.__members__[name]
        return attrs


class OutputFormat(Enum):
    """Serialization applied to every record of a destination"""

    TEXT = "text"
    XML = "xml"
    CSV = "csv"
    JSON = "json"

    @property
    def wraps_document(self) -> bool:
        """True for formats whose records live inside a single document (preamble/postamble)"""
        return self in (OutputFormat.XML, OutputFormat.JSON)

    @classmethod
    def parse(cls, value: Union["OutputFormat", str]) -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid format: {value}. Must be one of: {valid}") from None


class InitMode(Enum):
    """How a log file is opened by initialize_to_file()"""

    TRUNCATE = "w"
    APPEND = "a"

    @classmethod
    def parse(cls, value: Union["InitMode", str]) -> "InitMode":
        if isinstance(value, cls):
            return value
        name = str(value).strip().upper()
        if name not in cls.__members__:
            raise ValueError(f"Invalid init mode: {value}. Must be one of: truncate, append")
        return cls.__members__[name]

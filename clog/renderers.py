"""
Record renderers - one per output format.

Every renderer turns a LogRecord into the complete text of one record
(header, message and record terminator) so that the destination can write it
with a single call. Document formats (XML, JSON) also provide the preamble
written by Destination.initialize*() and the postamble written by
Destination.terminate().

Header fields are always considered in the same order:

    time, file[:line], func, level, message

Usage:
    renderer = create_renderer(OutputFormat.CSV)
    stream.write(renderer.preamble(attrs))
    stream.write(renderer.render(record, attrs, timestamp="12:00:00"))
"""

import html
import json
from collections.abc import Mapping
from dataclasses import dataclass
from beartype.typing import Dict, Optional, Tuple, Type

from serde import field, serialize, to_dict

from clog.levels import COLOR_RESET, LogLevel, OutputAttribute, OutputFormat, color_start

LEVEL_NAME_WIDTH = 6

XML_PREAMBLE = (
    '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
    '<!DOCTYPE log SYSTEM "clog.dtd">\n'
    "<log>\n"
)
XML_POSTAMBLE = "</log>\n"
JSON_PREAMBLE = '{\n\t"log": ['
JSON_POSTAMBLE = "\n\t]\n}"


@dataclass
class LogRecord:
    """A message on its way through the dispatch. Never stored."""

    level: LogLevel
    file: str
    line: int
    func: str
    message: str
    args: Tuple = ()

    def get_message(self) -> str:
        """
        Interpolate the arguments into the message.

        The message is %-formatted only when arguments were given, so that a
        message without arguments is written literally. A single mapping
        argument is used for named directives ("%(user)s").
        """
        if not self.args:
            return self.message
        args = self.args
        if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
            args = args[0]
        return self.message % args


@serialize
@dataclass
class JsonEntry:
    """Object written for each record in JSON format"""

    time: Optional[str] = field(default=None, skip_if_default=True)
    file: Optional[str] = field(default=None, skip_if_default=True)
    line: Optional[int] = field(default=None, skip_if_default=True)
    func: Optional[str] = field(default=None, skip_if_default=True)
    level: str = ""
    msg: str = ""


class Renderer:
    """Base class of the per-format renderers"""

    format: OutputFormat = None

    def preamble(self, attrs: OutputAttribute) -> str:
        """Text written once when a destination is initialized"""
        return ""

    def postamble(self) -> str:
        """Text written once when a destination is terminated"""
        return ""

    def render(self, record: LogRecord, attrs: OutputAttribute, timestamp: Optional[str] = None) -> str:
        """
        Render one record.

        Args:
            record: record to render
            attrs: active output attributes
            timestamp: formatted time, used only when attrs contains TIME

        Returns:
            Complete record text
        """
        raise NotImplementedError


class TextRenderer(Renderer):
    """
    Plain text, one line per record:

        [12:00:00] main.py:42, main() INFO   -- message
    """

    format = OutputFormat.TEXT

    def render(self, record: LogRecord, attrs: OutputAttribute, timestamp: Optional[str] = None) -> str:
        message = record.get_message()
        header = []
        if attrs & OutputAttribute.COLORED:
            header.append(color_start(record.level))
        if attrs & OutputAttribute.TIME:
            header.append(f"[{timestamp}] ")
        if attrs & OutputAttribute.FILE:
            header.append(f"{record.file}:{record.line}")
            header.append(", " if attrs & OutputAttribute.FUNC else " ")
        if attrs & OutputAttribute.FUNC:
            header.append(f"{record.func}() ")
        header.append(f"{record.level.name:<{LEVEL_NAME_WIDTH}} -- ")
        if attrs & OutputAttribute.COLORED:
            header.append(COLOR_RESET)
        return "".join(header) + message + "\n"


class XmlRenderer(Renderer):
    """
    One <message> element per record inside a <log> root:

        <message time="12:00:00" file="main.py" line="42" func="main" level="INFO">text</message>
    """

    format = OutputFormat.XML

    def preamble(self, attrs: OutputAttribute) -> str:
        return XML_PREAMBLE

    def postamble(self) -> str:
        return XML_POSTAMBLE

    def render(self, record: LogRecord, attrs: OutputAttribute, timestamp: Optional[str] = None) -> str:
        message = record.get_message()
        fields = []
        if attrs & OutputAttribute.TIME:
            fields.append(("time", timestamp))
        if attrs & OutputAttribute.FILE:
            fields.append(("file", record.file))
            fields.append(("line", record.line))
        if attrs & OutputAttribute.FUNC:
            fields.append(("func", record.func))
        fields.append(("level", record.level.name))
        attributes = " ".join(f'{name}="{html.escape(str(value))}"' for name, value in fields)
        return f"\t<message {attributes}>{html.escape(message, quote=False)}</message>\n"


class CsvRenderer(Renderer):
    """
    Tab-separated values. The preamble is the header row, listing exactly the
    columns enabled by the attributes:

        time	file	line	func	level	msg
    """

    format = OutputFormat.CSV
    separator = "\t"

    @staticmethod
    def columns(attrs: OutputAttribute) -> list:
        """Column names for the given attributes, in output order"""
        columns = []
        if attrs & OutputAttribute.TIME:
            columns.append("time")
        if attrs & OutputAttribute.FILE:
            columns.extend(["file", "line"])
        if attrs & OutputAttribute.FUNC:
            columns.append("func")
        columns.extend(["level", "msg"])
        return columns

    def preamble(self, attrs: OutputAttribute) -> str:
        return self.separator.join(self.columns(attrs)) + "\n"

    def render(self, record: LogRecord, attrs: OutputAttribute, timestamp: Optional[str] = None) -> str:
        message = record.get_message()
        values = []
        if attrs & OutputAttribute.TIME:
            values.append(timestamp)
        if attrs & OutputAttribute.FILE:
            values.extend([record.file, str(record.line)])
        if attrs & OutputAttribute.FUNC:
            values.append(record.func)
        values.extend([record.level.name, message])
        return self.separator.join(values) + "\n"


class JsonRenderer(Renderer):
    """
    One object per record in the "log" array of a root object:

        {
            "log": [
                {"time": "12:00:00", "level": "INFO", "msg": "text"},
                {"time": "12:00:01", "level": "ERROR", "msg": "other"}
            ]
        }
    """

    format = OutputFormat.JSON

    def __init__(self):
        self._first = True

    def preamble(self, attrs: OutputAttribute) -> str:
        self._first = True
        return JSON_PREAMBLE

    def postamble(self) -> str:
        return JSON_POSTAMBLE

    def render(self, record: LogRecord, attrs: OutputAttribute, timestamp: Optional[str] = None) -> str:
        entry = JsonEntry(level=record.level.name, msg=record.get_message())
        if attrs & OutputAttribute.TIME:
            entry.time = timestamp
        if attrs & OutputAttribute.FILE:
            entry.file = record.file
            entry.line = record.line
        if attrs & OutputAttribute.FUNC:
            entry.func = record.func
        separator = "" if self._first else ","
        self._first = False
        return f"{separator}\n\t\t{json.dumps(to_dict(entry), ensure_ascii=False)}"


RENDERERS: Dict[OutputFormat, Type[Renderer]] = {
    renderer.format: renderer for renderer in (TextRenderer, XmlRenderer, CsvRenderer, JsonRenderer)
}


def create_renderer(output_format: OutputFormat) -> Renderer:
    """
    Create the renderer for an output format.

    Raises:
        ValueError: if no renderer handles the format
    """
    try:
        return RENDERERS[output_format]()
    except KeyError:
        raise ValueError(f"No renderer for output format: {output_format}") from None

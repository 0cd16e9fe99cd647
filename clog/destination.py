"""
Destination - where messages go and how they look

A Destination bundles the output stream with its configuration: filter level,
output attributes, output format, time format and the optional lock hooks.
Every log call goes through Destination.vlog(), which:

1. acquires the lock hook (if any)
2. defaults the stream to sys.stderr if none was set
3. drops the message if its level is below the filter level
4. writes a blank message verbatim, without header
5. writes an empty line first when the message starts with a line feed
6. writes the record rendered for the active output format
7. releases the lock hook

The package keeps one shared destination (see clog.get_destination()), but
any number of independent destinations can be created.

Usage:
    from clog.destination import Destination
    from clog.levels import InitMode, LogLevel, OutputAttribute, OutputFormat

    dest = Destination()
    dest.set_filter_level(LogLevel.INFO)
    dest.set_output_attributes(OutputAttribute.TIME | OutputAttribute.COLORED)
    dest.warning("disk at %d%%", 91)

    # Document formats are bracketed by initialize/terminate
    if dest.initialize_to_file("app.xml", InitMode.TRUNCATE, OutputFormat.XML, OutputAttribute.VERBOSE):
        dest.info("started")
        dest.terminate()
"""

import os
import sys
from datetime import datetime
from beartype.typing import Any, Callable, Optional, TextIO, Tuple, Union

from clog.classifier import is_blank, starts_with_newline
from clog.exceptions import OutputFormatLockedError, StreamLockedError
from clog.file_stream import LogFileStream
from clog.levels import InitMode, LogLevel, OutputAttribute, OutputFormat
from clog.renderers import LogRecord, Renderer, create_renderer

DEFAULT_TIME_FORMAT = "%H:%M:%S"

LockHook = Callable[[Any], None]


class Destination:
    """
    Output stream plus the configuration applied to every message written to it.

    No synchronization is performed unless lock hooks are installed with
    set_lock()/set_unlock() or set_lock_handle(). Setters are never guarded
    by the hooks.

    Example:
        dest = Destination(stream=sys.stdout)
        dest.info("Processing %s", "items.csv")

        # Output:
        # INFO   -- Processing items.csv
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        filter_level: LogLevel = LogLevel.ALL,
        attributes: OutputAttribute = OutputAttribute.MINIMAL,
        output_format: OutputFormat = OutputFormat.TEXT,
    ):
        """
        Create a destination.

        Args:
            stream: Output stream (default: sys.stderr, chosen on first write)
            filter_level: Minimum level of the messages written
            attributes: Header decorations
            output_format: Serialization of the records
        """
        self._stream = stream
        self._filter_level = LogLevel.parse(filter_level)
        self._attributes = OutputAttribute.parse(attributes)
        self._format = OutputFormat.parse(output_format)
        self._renderer: Renderer = create_renderer(self._format)
        self._time_format = DEFAULT_TIME_FORMAT
        self._lock: Optional[LockHook] = None
        self._unlock: Optional[LockHook] = None
        self._lock_userdata: Any = None
        self._owns_stream = False
        self._initialized = False

    # Stream

    def set_stream(self, stream: Optional[TextIO]):
        """
        Set the output stream.

        Args:
            stream: Writable text stream, or None to fall back to sys.stderr on the next write

        Raises:
            StreamLockedError: if the destination is initialized with another stream
        """
        if stream is self._stream:
            return
        if self._initialized:
            raise StreamLockedError(self._stream, stream)
        self._close_owned_stream()
        self._stream = stream

    def get_stream(self) -> Optional[TextIO]:
        """Output stream, None until one is set or the first message is written"""
        return self._stream

    # Filter

    def set_filter_level(self, level: Union[LogLevel, int, str]):
        """
        Only write messages with level >= filter level.

        Args:
            level: LogLevel, level number or level name ("warning", "all", "none", ...)
        """
        self._filter_level = LogLevel.parse(level)

    def get_filter_level(self) -> LogLevel:
        return self._filter_level

    def get_filter_name(self) -> str:
        """Name of the filter level, in uppercase (e.g. "DEBUG")"""
        return self._filter_level.name

    # Attributes and format

    def set_output_attributes(self, attributes: Union[OutputAttribute, int, str]):
        self._attributes = OutputAttribute.parse(attributes)

    def get_output_attributes(self) -> OutputAttribute:
        return self._attributes

    def set_output_format(self, output_format: Union[OutputFormat, str]):
        """
        Set the output format.

        Args:
            output_format: OutputFormat or its name ("text", "xml", "csv", "json")

        Raises:
            OutputFormatLockedError: if the destination is initialized with another format
        """
        output_format = OutputFormat.parse(output_format)
        if output_format is self._format:
            return
        if self._initialized:
            raise OutputFormatLockedError(self._format, output_format)
        self._format = output_format
        self._renderer = create_renderer(output_format)

    def get_output_format(self) -> OutputFormat:
        return self._format

    def set_time_format(self, time_format: str):
        """
        Set the strftime() pattern used when OutputAttribute.TIME is active.

        Args:
            time_format: e.g. "%H:%M:%S" (default) or "%Y-%m-%d %H:%M:%S"
        """
        self._time_format = time_format

    def get_time_format(self) -> str:
        return self._time_format

    # Lock hooks

    def set_lock(self, lock: LockHook):
        """
        Set the function called with the lock user data before each message.

        Args:
            lock: Callable acquiring the caller's lock
        """
        self._lock = lock

    def set_unlock(self, unlock: LockHook):
        """
        Set the function called with the lock user data after each message.

        Args:
            unlock: Callable releasing the caller's lock
        """
        self._unlock = unlock

    def set_lock_userdata(self, userdata: Any):
        """Set the value passed to the lock and unlock hooks"""
        self._lock_userdata = userdata

    def get_lock_userdata(self) -> Any:
        return self._lock_userdata

    def set_lock_handle(self, handle):
        """
        Use an object with acquire()/release() methods as the lock hooks.

        Args:
            handle: e.g. threading.Lock(), or None to remove the hooks

        Example:
            dest.set_lock_handle(threading.Lock())
        """
        if handle is None:
            self._lock = self._unlock = None
            self._lock_userdata = None
            return
        self._lock = lambda userdata: userdata.acquire()
        self._unlock = lambda userdata: userdata.release()
        self._lock_userdata = handle

    # Initialization and termination

    def initialize(
        self,
        stream: TextIO,
        output_format: Union[OutputFormat, str] = OutputFormat.TEXT,
        attributes: Union[OutputAttribute, int, str] = OutputAttribute.MINIMAL,
    ) -> bool:
        """
        Start a logging session on a stream owned by the caller.

        Writes the preamble of the format (XML declaration and root tag, JSON
        root object, CSV header row). The stream is not closed by terminate().
        A session already running is terminated first.

        Args:
            stream: Writable text stream
            output_format: Format used for the whole session
            attributes: Header decorations

        Returns:
            True (the signature matches initialize_to_file())
        """
        self._start(stream, OutputFormat.parse(output_format), OutputAttribute.parse(attributes), owned=False)
        return True

    def initialize_to_default(
        self,
        output_format: Union[OutputFormat, str] = OutputFormat.TEXT,
        attributes: Union[OutputAttribute, int, str] = OutputAttribute.MINIMAL,
    ) -> bool:
        """
        Start a logging session on sys.stderr.

        Returns:
            True iff the session was started
        """
        return self.initialize(sys.stderr, output_format, attributes)

    def initialize_to_file(
        self,
        filepath: Union[str, os.PathLike],
        mode: Union[InitMode, str] = InitMode.TRUNCATE,
        output_format: Union[OutputFormat, str] = OutputFormat.TEXT,
        attributes: Union[OutputAttribute, int, str] = OutputAttribute.MINIMAL,
    ) -> bool:
        """
        Start a logging session on a file.

        Appending is refused for XML and JSON, whose records must stay inside
        one document. In that case, or when the file cannot be opened, nothing
        is written and the destination is left unchanged.
        Otherwise a session already running is terminated first.

        Args:
            filepath: Path to the log file (parent directories are created)
            mode: InitMode.TRUNCATE or InitMode.APPEND
            output_format: Format used for the whole session
            attributes: Header decorations

        Returns:
            True iff the session was started

        Example:
            if not dest.initialize_to_file("app.json", InitMode.TRUNCATE, OutputFormat.JSON):
                sys.exit(1)
        """
        mode = InitMode.parse(mode)
        output_format = OutputFormat.parse(output_format)
        attributes = OutputAttribute.parse(attributes)
        if mode is InitMode.APPEND and output_format.wraps_document:
            return False
        if self._owns_stream and os.path.abspath(self._stream.filepath) == os.path.abspath(filepath):
            # Reopening the session file: complete it before it is truncated or appended to
            self.terminate()
        try:
            stream = LogFileStream(filepath, mode=mode)
        except OSError:
            return False
        self._start(stream, output_format, attributes, owned=True)
        return True

    def _start(self, stream: TextIO, output_format: OutputFormat, attributes: OutputAttribute, owned: bool):
        # The running document is completed before the new one begins
        self.terminate()
        self._stream = stream
        self._owns_stream = owned
        self._format = output_format
        self._renderer = create_renderer(output_format)
        self._attributes = attributes
        self._initialized = True
        self._write(self._renderer.preamble(attributes))

    def terminate(self):
        """
        End the logging session.

        Writes the postamble of the format, closes the file opened by
        initialize_to_file() and unsets the stream. Does nothing if no session
        was started.
        """
        if not self._initialized:
            return
        self._write(self._renderer.postamble())
        self._flush()
        self._close_owned_stream()
        self._stream = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def reset(self):
        """
        Restore every default: no stream, filter ALL, MINIMAL attributes, TEXT
        format, default time format and no lock hooks.

        A file opened by initialize_to_file() is closed without postamble.
        """
        self._close_owned_stream()
        self.__init__()

    def _close_owned_stream(self):
        if self._owns_stream and self._stream is not None:
            self._stream.close()
        self._owns_stream = False

    # Dispatch

    def log(self, file: str, line: int, func: str, level: Union[LogLevel, int], message: str, *args):
        """
        Log a message with explicit call site information.

        Args:
            file: Source file name
            line: Source line number
            func: Calling function name
            level: Level of the message
            message: printf-style format string
            *args: Arguments interpolated into the message

        Example:
            dest.log("main.py", 12, "main", LogLevel.NOTICE, "%d files left", 3)
        """
        self.vlog(file, line, func, level, message, args)

    def vlog(self, file: str, line: int, func: str, level: Union[LogLevel, int], message: str, args: Tuple = ()):
        """
        Same as log() with the arguments given as one tuple.

        Raises:
            TypeError: if message is not a string, or the arguments do not match the message
            ValueError: if the message contains an invalid % directive
        """
        if not isinstance(message, str):
            raise TypeError(f"Log message must be a str, not {type(message).__name__}")
        level = LogLevel.parse(level)

        self._acquire()
        try:
            if self._stream is None:
                self._stream = sys.stderr
            if level < self._filter_level:
                return
            if is_blank(message):
                self._write(message)
                return
            prefix = ""
            if starts_with_newline(message):
                prefix = "\n"
                message = message[1:]
            record = LogRecord(level, file, line, func, message, tuple(args))
            timestamp = self._timestamp() if self._attributes & OutputAttribute.TIME else None
            self._write(prefix + self._renderer.render(record, self._attributes, timestamp))
        finally:
            self._release()

    def _emit(self, level: LogLevel, message: str, args: Tuple, stacklevel: int):
        # Frame 0 is _emit, frame 1 the leveled method, frame stacklevel + 1 the caller
        frame = sys._getframe(stacklevel + 1)
        code = frame.f_code
        self.vlog(os.path.basename(code.co_filename), frame.f_lineno, code.co_name, level, message, args)

    def trace(self, message: str, *args, stacklevel: int = 1):
        """Log a control flow marker"""
        self._emit(LogLevel.TRACE, message, args, stacklevel)

    def debug(self, message: str, *args, stacklevel: int = 1):
        """
        Log a debugging message.

        Args:
            message: printf-style format string
            *args: Arguments interpolated into the message
            stacklevel: Number of frames between the caller to report and this method

        Example:
            dest.debug("x=%d", 1)
        """
        self._emit(LogLevel.DEBUG, message, args, stacklevel)

    def verbose(self, message: str, *args, stacklevel: int = 1):
        """Log a detailed information message"""
        self._emit(LogLevel.VERBOSE, message, args, stacklevel)

    def info(self, message: str, *args, stacklevel: int = 1):
        self._emit(LogLevel.INFO, message, args, stacklevel)

    def notice(self, message: str, *args, stacklevel: int = 1):
        """Log an important information message"""
        self._emit(LogLevel.NOTICE, message, args, stacklevel)

    def warning(self, message: str, *args, stacklevel: int = 1):
        self._emit(LogLevel.WARNING, message, args, stacklevel)

    def error(self, message: str, *args, stacklevel: int = 1):
        self._emit(LogLevel.ERROR, message, args, stacklevel)

    def fatal(self, message: str, *args, stacklevel: int = 1):
        """Log a non-recoverable error, usually right before exiting"""
        self._emit(LogLevel.FATAL, message, args, stacklevel)

    # Helpers

    def _timestamp(self) -> str:
        return datetime.now().strftime(self._time_format)

    def _acquire(self):
        if self._lock is not None:
            self._lock(self._lock_userdata)

    def _release(self):
        if self._unlock is not None:
            self._unlock(self._lock_userdata)

    def _write(self, content: str):
        """
        Write to the output stream, best effort.

        A failing stream is not reported to the caller: the content is written
        to sys.stderr instead, after a short notice.
        """
        if not content:
            return
        stream = self._stream if self._stream is not None else sys.stderr
        try:
            stream.write(content)
        except (OSError, ValueError):
            if stream is not sys.stderr:
                sys.stderr.write("Logging error: failed to write to output stream\n")
                sys.stderr.write(content)

    def _flush(self):
        if self._stream is None:
            return
        try:
            self._stream.flush()
        except (OSError, ValueError):
            pass

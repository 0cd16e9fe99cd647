"""
File Stream - log file opened and owned by a destination

Destination.initialize_to_file() opens its target through LogFileStream so
that the file can be closed again by terminate(), while streams handed in by
the caller (sys.stderr, an already open file, a StringIO) are never closed.

Features:
- Truncating or appending open mode
- Automatic directory creation
- Flush after every write, so a crash loses at most the record being written

Usage:
    from clog.file_stream import LogFileStream
    from clog.levels import InitMode

    stream = LogFileStream("/var/log/app/app.log", mode=InitMode.APPEND)
    stream.write("INFO   -- started\n")
    stream.close()
"""

from pathlib import Path

from clog.levels import InitMode


class LogFileStream:
    """
    Writable text stream over a log file.

    The file is opened in the constructor so that an unusable path is reported
    immediately (OSError) rather than on the first record.

    Example:
        with LogFileStream("app.log") as stream:
            stream.write("WARNING -- disk at 91%\n")
    """

    def __init__(self, filepath: str, mode: InitMode = InitMode.TRUNCATE, encoding: str = "utf-8"):
        """
        Open the log file.

        Args:
            filepath: Path to log file
            mode: InitMode.TRUNCATE to start an empty file, InitMode.APPEND to keep its content
            encoding: File encoding (default: utf-8)

        Raises:
            OSError: if the directory cannot be created or the file cannot be opened for writing
        """
        self.filepath = Path(filepath)
        self.mode = mode
        self.encoding = encoding
        created = self._ensure_directory()
        try:
            self._file = open(self.filepath, mode.value, encoding=encoding)
        except OSError:
            for directory in created:
                directory.rmdir()
            raise

    def _ensure_directory(self) -> list:
        """
        Create log directory if it doesn't exist.

        Returns:
            Directories created, deepest first
        """
        created = []
        parent = self.filepath.parent
        while not parent.exists():
            created.append(parent)
            parent = parent.parent
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        return created

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, content: str) -> int:
        """
        Write content to the file and flush it.

        Args:
            content: Content to write (should include newline if needed)

        Returns:
            Number of characters written
        """
        written = self._file.write(content)
        self._file.flush()
        return written

    def flush(self):
        if not self._file.closed:
            self._file.flush()

    def close(self):
        """
        Close file handle.

        Safe to call more than once.
        """
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()

    def __repr__(self):
        return f"LogFileStream({str(self.filepath)!r}, mode={self.mode.name})"

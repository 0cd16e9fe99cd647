"""
Unit tests for renderers.py

Tests the per-format record rendering including:
- Header layout for every attribute
- Escaping in XML
- CSV header row and record columns
- JSON record separation and document structure
"""

import json
import unittest

from clog.levels import LogLevel, OutputAttribute, OutputFormat
from clog.renderers import (
    CsvRenderer,
    JsonRenderer,
    LogRecord,
    TextRenderer,
    XmlRenderer,
    create_renderer,
)

TIMESTAMP = "12:00:00"


def make_record(level=LogLevel.INFO, message="hello %s", args=("world",)):
    return LogRecord(level, "main.py", 42, "main", message, args)


class TestLogRecord(unittest.TestCase):
    """Test message interpolation"""

    def test_positional_arguments(self):
        record = make_record(message="disk at %d%%", args=(91,))
        self.assertEqual(record.get_message(), "disk at 91%")

    def test_mapping_argument(self):
        record = make_record(message="%(user)s logged in", args=({"user": "bob"},))
        self.assertEqual(record.get_message(), "bob logged in")

    def test_no_arguments_is_literal(self):
        """Test that a message without arguments is not %-formatted"""
        record = make_record(message="100% done %s", args=())
        self.assertEqual(record.get_message(), "100% done %s")

    def test_mismatched_arguments_raise(self):
        record = make_record(message="%d items", args=("many",))
        with self.assertRaises(TypeError):
            record.get_message()


class TestTextRenderer(unittest.TestCase):
    """Test plain text records"""

    def setUp(self):
        self.renderer = TextRenderer()

    def test_minimal(self):
        output = self.renderer.render(make_record(), OutputAttribute.MINIMAL)
        self.assertEqual(output, "INFO   -- hello world\n")

    def test_level_name_padding(self):
        """Test that level names are left-justified before the separator"""
        warning = self.renderer.render(make_record(LogLevel.WARNING, "disk at %d%%", (91,)), OutputAttribute.MINIMAL)
        error = self.renderer.render(make_record(LogLevel.ERROR, "boom", ()), OutputAttribute.MINIMAL)
        self.assertEqual(warning, "WARNING -- disk at 91%\n")
        self.assertEqual(error, "ERROR  -- boom\n")

    def test_time(self):
        output = self.renderer.render(make_record(), OutputAttribute.TIME, TIMESTAMP)
        self.assertEqual(output, "[12:00:00] INFO   -- hello world\n")

    def test_file_without_func(self):
        output = self.renderer.render(make_record(), OutputAttribute.FILE)
        self.assertEqual(output, "main.py:42 INFO   -- hello world\n")

    def test_func_without_file(self):
        output = self.renderer.render(make_record(), OutputAttribute.FUNC)
        self.assertEqual(output, "main() INFO   -- hello world\n")

    def test_verbose(self):
        output = self.renderer.render(make_record(), OutputAttribute.VERBOSE, TIMESTAMP)
        self.assertEqual(output, "[12:00:00] main.py:42, main() INFO   -- hello world\n")

    def test_colored_header_only(self):
        """Test that only the header is wrapped in color codes"""
        record = make_record(LogLevel.ERROR, "boom", ())
        output = self.renderer.render(record, OutputAttribute.COLORED | OutputAttribute.TIME, TIMESTAMP)
        self.assertEqual(output, "\x1b[31m[12:00:00] ERROR  -- \x1b[0mboom\n")

    def test_colored_palette(self):
        expected = {
            LogLevel.DEBUG: "\x1b[34m",
            LogLevel.VERBOSE: "\x1b[36m",
            LogLevel.INFO: "\x1b[32m",
            LogLevel.NOTICE: "\x1b[33m",
            LogLevel.WARNING: "\x1b[35m",
            LogLevel.ERROR: "\x1b[31m",
            LogLevel.FATAL: "\x1b[1;31m",
        }
        for level, code in expected.items():
            output = self.renderer.render(make_record(level), OutputAttribute.COLORED)
            self.assertTrue(output.startswith(code), f"{level.name} should start with {code!r}")

    def test_no_preamble(self):
        self.assertEqual(self.renderer.preamble(OutputAttribute.VERBOSE), "")
        self.assertEqual(self.renderer.postamble(), "")


class TestXmlRenderer(unittest.TestCase):
    """Test XML records"""

    def setUp(self):
        self.renderer = XmlRenderer()

    def test_preamble_and_postamble(self):
        preamble = self.renderer.preamble(OutputAttribute.MINIMAL)
        self.assertTrue(preamble.startswith('<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'))
        self.assertIn("<!DOCTYPE log", preamble)
        self.assertTrue(preamble.endswith("<log>\n"))
        self.assertEqual(self.renderer.postamble(), "</log>\n")

    def test_minimal(self):
        output = self.renderer.render(make_record(), OutputAttribute.MINIMAL)
        self.assertEqual(output, '\t<message level="INFO">hello world</message>\n')

    def test_verbose(self):
        output = self.renderer.render(make_record(), OutputAttribute.VERBOSE, TIMESTAMP)
        self.assertEqual(
            output,
            '\t<message time="12:00:00" file="main.py" line="42" func="main" level="INFO">'
            "hello world</message>\n",
        )

    def test_colored_is_ignored(self):
        output = self.renderer.render(make_record(), OutputAttribute.COLORED)
        self.assertNotIn("\x1b", output)

    def test_escaping(self):
        record = LogRecord(LogLevel.INFO, 'a"b.py', 1, "f", "a < b & %s", ('"c"',))
        output = self.renderer.render(record, OutputAttribute.FILE)
        self.assertIn('file="a&quot;b.py"', output)
        self.assertIn('>a &lt; b &amp; "c"</message>', output)


class TestCsvRenderer(unittest.TestCase):
    """Test tab-separated records"""

    def setUp(self):
        self.renderer = CsvRenderer()

    def test_header_row_lists_enabled_columns(self):
        self.assertEqual(self.renderer.preamble(OutputAttribute.MINIMAL), "level\tmsg\n")
        self.assertEqual(
            self.renderer.preamble(OutputAttribute.VERBOSE), "time\tfile\tline\tfunc\tlevel\tmsg\n"
        )
        self.assertEqual(
            self.renderer.preamble(OutputAttribute.TIME | OutputAttribute.FUNC), "time\tfunc\tlevel\tmsg\n"
        )

    def test_record(self):
        output = self.renderer.render(make_record(), OutputAttribute.VERBOSE, TIMESTAMP)
        self.assertEqual(output, "12:00:00\tmain.py\t42\tmain\tINFO\thello world\n")

    def test_record_and_header_column_counts_match(self):
        """Test that each record has as many columns as the header row"""
        expected_columns = {
            OutputAttribute.MINIMAL: 2,
            OutputAttribute.TIME: 3,
            OutputAttribute.FILE: 4,
            OutputAttribute.FUNC: 3,
            OutputAttribute.FILE | OutputAttribute.FUNC: 5,
            OutputAttribute.VERBOSE: 6,
        }
        for attrs, count in expected_columns.items():
            header = self.renderer.preamble(attrs).rstrip("\n").split("\t")
            record = self.renderer.render(make_record(), attrs, TIMESTAMP).rstrip("\n").split("\t")
            self.assertEqual(len(header), len(record), f"Column count mismatch for {attrs!r}")
            self.assertEqual(len(header), count)


class TestJsonRenderer(unittest.TestCase):
    """Test JSON records"""

    def setUp(self):
        self.renderer = JsonRenderer()

    def test_first_record_has_no_separator(self):
        self.renderer.preamble(OutputAttribute.MINIMAL)
        first = self.renderer.render(make_record(), OutputAttribute.MINIMAL)
        second = self.renderer.render(make_record(), OutputAttribute.MINIMAL)
        self.assertTrue(first.startswith("\n\t\t{"))
        self.assertTrue(second.startswith(",\n\t\t{"))

    def test_preamble_resets_first_record(self):
        self.renderer.preamble(OutputAttribute.MINIMAL)
        self.renderer.render(make_record(), OutputAttribute.MINIMAL)
        self.renderer.preamble(OutputAttribute.MINIMAL)
        self.assertFalse(self.renderer.render(make_record(), OutputAttribute.MINIMAL).startswith(","))

    def test_minimal_keys(self):
        entry = json.loads(self.renderer.render(make_record(), OutputAttribute.MINIMAL))
        self.assertEqual(entry, {"level": "INFO", "msg": "hello world"})

    def test_verbose_keys_in_order(self):
        entry = json.loads(self.renderer.render(make_record(), OutputAttribute.VERBOSE, TIMESTAMP))
        self.assertEqual(list(entry), ["time", "file", "line", "func", "level", "msg"])
        self.assertEqual(entry["time"], "12:00:00")
        self.assertEqual(entry["file"], "main.py")
        self.assertEqual(entry["line"], 42)
        self.assertEqual(entry["func"], "main")

    def test_document_is_valid_json(self):
        """Test that preamble, records and postamble form one JSON document"""
        document = self.renderer.preamble(OutputAttribute.TIME)
        document += self.renderer.render(make_record(), OutputAttribute.TIME, TIMESTAMP)
        record = make_record(LogLevel.ERROR, 'quote " and \\ backslash', ())
        document += self.renderer.render(record, OutputAttribute.TIME, TIMESTAMP)
        document += self.renderer.postamble()

        self.assertTrue(document.startswith('{\n\t"log": ['))
        self.assertTrue(document.endswith("\n\t]\n}"))
        log = json.loads(document)["log"]
        self.assertEqual(len(log), 2)
        self.assertEqual(log[1]["msg"], 'quote " and \\ backslash')
        self.assertEqual(log[1]["level"], "ERROR")

    def test_empty_document_is_valid_json(self):
        document = self.renderer.preamble(OutputAttribute.MINIMAL) + self.renderer.postamble()
        self.assertEqual(json.loads(document), {"log": []})


class TestCreateRenderer(unittest.TestCase):
    """Test renderer selection"""

    def test_every_format_has_a_renderer(self):
        for output_format in OutputFormat:
            renderer = create_renderer(output_format)
            self.assertIs(renderer.format, output_format)

    def test_renderers_are_independent(self):
        """Test that each call returns a fresh renderer with its own state"""
        self.assertIsNot(create_renderer(OutputFormat.JSON), create_renderer(OutputFormat.JSON))

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            create_renderer("yaml")


if __name__ == "__main__":
    unittest.main()

"""
Message classification used by the dispatch before any formatting happens.

A message made only of blank characters is written as-is, without header.
A message starting with a line feed is written after an empty line.
"""

BLANK_CHARACTERS = frozenset("\t\n\v\f\r ")


def is_blank(message: str) -> bool:
    """True if the message is empty or contains only tab, LF, VT, FF, CR and space"""
    for char in message:
        if char not in BLANK_CHARACTERS:
            return False
    return True


def starts_with_newline(message: str) -> bool:
    return message[:1] == "\n"

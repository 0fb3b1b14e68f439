"""Split a single CSV line into fields.

Quoting is deliberately simpler than RFC 4180: every double quote flips the
"inside quotes" state and is dropped, so a doubled quote ("") is not turned
into a literal quote character. Bank exports seen in the wild rarely rely on
escaped quotes, and the lenient behaviour never rejects a row.
"""

from typing import List

QUOTE = '"'


def split_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one line on delimiters that are not inside double quotes.

    Args:
        line: Raw line without its trailing newline.
        delimiter: Single field separator character.

    Returns:
        Trimmed field values in order. An empty line gives [""].
    """
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields

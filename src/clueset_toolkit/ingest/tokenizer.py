"""
Module: ingest.tokenizer

Purpose:
    Split one CSV line into fields. Quoted fields may contain the delimiter,
    and a doubled quote inside a quoted field is a literal quote.

Key Functions:
    - tokenize_line(): Split a single line into its fields

Used By:
    - ingest.parser: Tokenizes every data row
"""

from __future__ import annotations

from typing import List


def tokenize_line(line: str, delimiter: str = ",", quote_char: str = '"') -> List[str]:
    """
    Split a CSV line into fields in a single left-to-right pass.

    Unbalanced quotes are not an error here: the rest of the line simply
    stays in one field, which the parser reports as a field-count mismatch.

    Args:
        line: One line of CSV text without its line terminator
        delimiter: Field separator
        quote_char: Quote character

    Returns:
        Field strings in order (never empty; "" yields [""])

    Example:
        >>> tokenize_line('final,QUOTES,0,"He said ""Hi"" twice",Greeting')
        ['final', 'QUOTES', '0', 'He said "Hi" twice', 'Greeting']
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == quote_char:
            if in_quotes and i + 1 < n and line[i + 1] == quote_char:
                current.append(quote_char)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields

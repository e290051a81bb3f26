"""sysreview I/O -- bibliographic lexing, conversion, readers and writers."""
from sysreview.io.converter import BibtexConverter, ConversionFailure, ConversionResult
from sysreview.io.lexer import RawEntry, split_entries
from sysreview.io.readers import read_studies
from sysreview.io.writers import write_studies

__all__ = [
    "BibtexConverter",
    "ConversionFailure",
    "ConversionResult",
    "RawEntry",
    "read_studies",
    "split_entries",
    "write_studies",
]

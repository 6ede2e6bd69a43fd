from .inline import InlineText, param_name, parse_inline
from .parser import DocumentParseError, expand_step, parse_document, parse_document_file

__all__ = [
    "DocumentParseError",
    "InlineText",
    "expand_step",
    "param_name",
    "parse_document",
    "parse_document_file",
    "parse_inline",
]

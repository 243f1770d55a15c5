from .errors import TreeDocumentError
from .tree_document import (
    DEFAULT_EXPORT_NAME,
    dumps_tree_document,
    format_for_path,
    load_tree_document,
    loads_tree_document,
    parse_tree_document,
    save_tree_document,
    strip_derived_fields,
)

__all__ = [
    "DEFAULT_EXPORT_NAME",
    "TreeDocumentError",
    "dumps_tree_document",
    "format_for_path",
    "load_tree_document",
    "loads_tree_document",
    "parse_tree_document",
    "save_tree_document",
    "strip_derived_fields",
]

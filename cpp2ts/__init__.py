"""C++ to TypeScript conversion aid."""

from .api import (  # noqa: F401
    parse_source,
    normalize_source,
    convert_cst,
    convert,
    pretty,
    dump_tree,
)
from .errors import ConversionError, UnsupportedConstruct  # noqa: F401

"""Named constants shared across the pipeline."""

from __future__ import annotations

LANGUAGE = "cpp"

FILE_CONTEXT = "file"

INDENT = "  "
NAME_SEPARATOR = "_"
FIELD_SEPARATOR = "."
SCOPE_SEPARATOR = "::"

TYPE_MAP: dict[str, str] = {
    "int": "number",
    "unsigned": "number",
    "short": "number",
    "long": "number",
    "float": "number",
    "double": "number",
    "ld": "number",
    "size_t": "number",
    "char": "string",
    "bool": "boolean",
    "void": "void",
    "auto": "",
    "std::string": "string",
    "string": "string",
}

PRETTIER_OPTIONS: tuple[str, ...] = (
    "--no-semi",
    "--single-quote",
    "--trailing-comma=all",
    "--print-width=72",
    "--tab-width=2",
    "--arrow-parens=avoid",
    "--quote-props=as-needed",
    "--bracket-spacing",
    "--prose-wrap=always",
    "--end-of-line=lf",
    "--single-attribute-per-line",
)
PRETTIER_COMMAND: tuple[str, ...] = ("npx", "prettier", "--stdin-filepath", "out.ts")

OPERATOR_MAP: dict[str, str] = {
    "and": "&&",
    "or": "||",
    "not": "!",
    "bitand": "&",
    "bitor": "|",
    "xor": "^",
    "compl": "~",
}

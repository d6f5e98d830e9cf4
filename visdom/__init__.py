"""HTML parsing, node traversal, attribute and text access, and tree mutation."""

__version__ = "0.1.0"
__all__ = ["document", "errors", "node", "parser", "values"]
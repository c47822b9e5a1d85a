"""Static documentation site generator with incremental, dependency-ordered builds."""

__version__ = "0.1.0"

"""A small three-stage compiler: parser, tree optimizer and assembly generator."""

__version__ = "0.1.0"
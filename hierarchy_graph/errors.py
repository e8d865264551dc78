"""Exceptions raised by the hierarchy graph package."""


class HierarchyGraphError(Exception):
    """Base class for all package errors."""


class DumpError(HierarchyGraphError):
    """The structure document could not be written to its destination."""


class ConfigError(HierarchyGraphError):
    """A dumper configuration file is missing keys or has invalid values."""

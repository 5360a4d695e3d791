"""Static audit of tenant-scoping progress across data-access modules."""

__version__ = "0.3.0"

"""User programs, a shell parser, a page-table model and device ring layouts for a small teaching Unix."""

__version__ = "0.1.0"
"""express-ddd-gen: scaffold Express + TypeScript projects in a DDD layout."""

__version__ = "0.1.0"

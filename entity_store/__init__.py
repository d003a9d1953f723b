"""Top-level package for the schema-driven entity store."""

__version__ = "0.1.0"

from .startup import ensure_schema, seed_catalog  # noqa: E402

__all__ = ["__version__", "ensure_schema", "seed_catalog"]

"""scriptgate: HTTP dispatcher whose routes are sandboxed Python scripts."""

__version__ = "0.1.0"

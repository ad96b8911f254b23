"""cove: persistent configuration store for isolated application containers."""

__version__ = "0.1.0"

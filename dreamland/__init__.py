"""Client, command line and CORS proxy for a running local multiverse of universes, services and simple nodes."""

__version__ = "0.1.0"
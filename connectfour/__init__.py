"""Server-authoritative two-player Connect-Four over WebSockets."""

__version__ = "0.1.0"

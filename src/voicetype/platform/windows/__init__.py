"""Windows platform implementation."""

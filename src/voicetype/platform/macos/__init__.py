"""macOS platform implementation."""

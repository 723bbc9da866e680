"""Linux platform implementation."""

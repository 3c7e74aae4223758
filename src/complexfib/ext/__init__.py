"""External surfaces."""

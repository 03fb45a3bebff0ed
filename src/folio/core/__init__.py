"""Loading and page population core."""

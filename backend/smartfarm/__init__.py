"""Smart Farm image upload service."""

"""Football match prediction service."""

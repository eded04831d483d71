"""Domain model: enums and product records."""

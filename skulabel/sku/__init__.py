"""SKU generation and manufacturer code lookups."""

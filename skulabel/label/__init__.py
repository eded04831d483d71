"""Label composition and printable documents."""

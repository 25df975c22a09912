"""Online bookstore REST API."""

"""Request and response schemas for the REST API."""

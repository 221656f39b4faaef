"""Request/response schemas and event payloads."""

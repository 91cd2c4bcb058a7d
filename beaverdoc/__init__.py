"""BeaverDoc - document management service with traceability footers."""

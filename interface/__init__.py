"""Host-side interfaces: background worker, REST API, and console CLI."""

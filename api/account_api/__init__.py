"""Account API of the web storage service."""

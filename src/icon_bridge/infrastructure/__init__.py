"""Infrastructure - HTTP transport, provider API clients and storage."""

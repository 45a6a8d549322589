"""External adapters for the treat relay.

This package contains all external dependencies (HTTP clients,
HTTP servers, etc.) and provides implementations of the core port interfaces.

Adapter Organization:

- trigger/: Adapters for firing the downstream actuator (HTTP)
- webhook/: HTTP webhook receiver for provider deliveries
"""

"""Test suite for the treat relay.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - HTTP trigger against httpx mock transports
   - Webhook server over a real local socket

3. fakes/: Port implementations for testing
   - In-memory implementation of TriggerPort
   - Controllable clock for the debouncer
"""

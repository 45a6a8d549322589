"""Webhook receiver adapters.

Provides the HTTP endpoint the transaction-monitoring provider posts to:
- Authenticate deliveries with a shared secret
- Hand payloads to the relay core
- Shape relay outcomes into JSON responses
"""

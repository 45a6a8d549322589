"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeTriggerPort: Captured trigger calls with canned responses
- FakeClock: Manually advanced millisecond clock
"""

from .clock import FakeClock
from .trigger import FakeTriggerPort

__all__ = [
    "FakeClock",
    "FakeTriggerPort",
]

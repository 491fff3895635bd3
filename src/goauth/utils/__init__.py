"""Utility modules for the goauth SDK.

Currently holds log sanitization helpers used by the client and transport.
"""

__all__: list[str] = []

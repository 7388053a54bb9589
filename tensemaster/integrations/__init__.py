"""
External stores for the Tense Master engine.

Modules:
- rest_backend: httpx client for the hosted PostgREST-style API
"""
from .rest_backend import RestBackend

__all__ = ["RestBackend"]

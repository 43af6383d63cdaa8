"""Endpoint Collector engine.

Keep top-level imports lightweight; the HTTP stack is pulled in by the submodules that need it.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

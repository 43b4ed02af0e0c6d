"""Slug redirector with asynchronous visit analytics."""

__version__ = "1.0.0"

"""Routing — trie-based path router with named and catch-all segments.

Patterns use ``:name`` for a single segment and ``*name`` for the rest
of the path. Matched bindings are attached to the request as ``Params``.
"""

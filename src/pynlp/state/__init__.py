"""Scan state layer.

Per-source scan bookkeeping: the cache holding the latest scan, the state
machine deciding when a physical scan may be dispatched, and the policies
both are driven by.  Nothing here is shared between sources.
"""

"""State/store layer.

Each piece of shared state (current position, roster, route path) has
exactly one writer.  This package holds the arbitration policy, the
position slot, and the change notifications readers subscribe to.
"""

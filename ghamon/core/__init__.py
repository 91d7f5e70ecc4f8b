"""ghamon core — refresh state machine, fetch pipeline and viewport.

Nothing in this package performs network or terminal I/O; the runtime
shell in ``ghamon.dashboard`` interprets the effects it returns.
"""

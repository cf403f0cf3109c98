"""
Receipt ledger, points/withdrawal calculator and the visitor/admin routes
built on them.
"""

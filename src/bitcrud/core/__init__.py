"""
Core infrastructure: settings, logging, database access and middleware.
"""

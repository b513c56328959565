"""
Operational helpers: logging setup and process management.
"""

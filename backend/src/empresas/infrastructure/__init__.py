"""
Infrastructure package - Database handle, store adapters and demo data.
"""

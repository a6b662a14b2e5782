"""
Shared helpers: fan-out policies, path handling, and display formatting.
"""

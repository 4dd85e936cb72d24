"""
authcore - encryption, password hashing, signed tokens and login throttling.
"""

__version__ = "1.0.0"

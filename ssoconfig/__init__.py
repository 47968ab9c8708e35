"""
SSOConfig - SSO session management for the shared credentials config file.
"""

__version__ = "0.1.0"

"""
SSOConfig - SSO session management for the shared credentials config file.

Main entry point for running the package directly with `python -m ssoconfig`.
"""

from ssoconfig.cli.main import cli

if __name__ == "__main__":
    cli()

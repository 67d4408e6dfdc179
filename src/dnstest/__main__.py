"""
DNS Test - Main entry point

This module allows `python -m dnstest` by delegating to cli.py.
"""

from .cli import cli

if __name__ == "__main__":
    cli()

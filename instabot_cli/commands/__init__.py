"""
CLI command modules.
"""

from instabot_cli.commands import serve, sign, verify

__all__ = ["serve", "sign", "verify"]

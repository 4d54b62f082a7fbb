"""
Module 04 - Instabot CLI

Command-line interface for running and operating the gateway.

Usage:
    python -m instabot_cli serve
    python -m instabot_cli sign "buy BTC 0.1" --method hash --secret s3cret
    python -m instabot_cli verify "buy BTC 0.1 sig:..."
"""

__version__ = "0.1.0"

"""Utility module for the language server launcher.

This module provides cross-cutting utilities:
- Logging: Configured logging with token redaction
- Chain: Ordered first-match resolution chains
"""

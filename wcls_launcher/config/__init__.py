"""Configuration module for the language server launcher.

This module handles launcher settings and credentials:
- SettingsManager: JSON-based settings persistence
- LauncherSettings: Settings dataclass with environment overrides
- TokenStore: GitHub token lookup via environment or keyring
- Paths: Application directories and install layout
"""

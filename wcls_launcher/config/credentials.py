"""GitHub token storage for the language server launcher.

Uses the system keyring (Windows Credential Manager, macOS Keychain,
Linux Secret Service) so an access token for the release feed does not
have to live in the settings file.
"""

import os
from typing import Mapping, Optional

import keyring
from keyring.errors import KeyringError


ENV_GITHUB_TOKEN = "GITHUB_TOKEN"


class TokenStore:
    """GitHub token lookup: environment first, then the system keyring."""

    SERVICE_NAME = "wc-language-server-launcher"
    USERNAME = "github-token"

    def save_token(self, token: str) -> bool:
        """
        Save a GitHub token in the keyring.

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            keyring.set_password(self.SERVICE_NAME, self.USERNAME, token)
            return True
        except KeyringError:
            return False

    def get_token(self, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """
        Retrieve the GitHub token.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            Token string or None if none is configured
        """
        environ = os.environ if environ is None else environ
        token = environ.get(ENV_GITHUB_TOKEN, "").strip()
        if token:
            return token
        try:
            return keyring.get_password(self.SERVICE_NAME, self.USERNAME)
        except KeyringError:
            return None

    def delete_token(self) -> bool:
        """
        Remove the saved token.

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            keyring.delete_password(self.SERVICE_NAME, self.USERNAME)
            return True
        except KeyringError:
            return False

"""
Authenticator - Obtains Gmail OAuth credentials
Reuses a saved token when it still works, otherwise runs the authorization-code flow
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.errors import HttpError
from rich.console import Console

from gmail_housekeeping.config import SCOPES, Settings
from gmail_housekeeping.errors import AuthError
from gmail_housekeeping.models import ClientSecrets


logger = logging.getLogger(__name__)

InputProvider = Callable[[str], str]
ServiceFactory = Callable[[Credentials], object]


class Authenticator:
    """Resolves client secrets, then loads or creates the user token"""

    def __init__(
        self,
        settings: Settings,
        service_factory: ServiceFactory,
        console: Optional[Console] = None,
        input_provider: InputProvider = input
    ):
        self.settings = settings
        self.service_factory = service_factory
        self.console = console or Console()
        self.input_provider = input_provider
        self.token_path = Path(settings.token_path)

    # === Main Entry Point ===

    def authenticate(self) -> Credentials:
        """Return working credentials, re-authorizing if the saved token is unusable"""
        secrets = self.load_client_secrets()
        logger.debug(f"Using OAuth client from {secrets.source}")

        creds = self._load_saved_token()
        if creds is not None:
            return creds

        return self._authorize(secrets)

    # === Client Secrets ===

    def load_client_secrets(self) -> ClientSecrets:
        """Read client id/secret from the credentials file, falling back to the environment"""
        credentials_path = Path(self.settings.credentials_path)

        if credentials_path.exists():
            try:
                data = json.loads(credentials_path.read_text())
                section = data.get('installed') or data.get('web')
                return ClientSecrets(
                    client_id=section['client_id'],
                    client_secret=section['client_secret'],
                    redirect_uri=section['redirect_uris'][0],
                    source=str(credentials_path)
                )
            except (ValueError, TypeError, KeyError, IndexError) as error:
                raise AuthError(f"Could not read client secrets from {credentials_path}: {error}") from error

        if self.settings.client_id and self.settings.client_secret:
            return ClientSecrets(
                client_id=self.settings.client_id,
                client_secret=self.settings.client_secret,
                redirect_uri=self.settings.redirect_uri,
                source='environment'
            )

        raise AuthError(
            f"{credentials_path} not found and CLIENT_ID/CLIENT_SECRET not set.\n"
            "Please download credentials.json from Google Cloud Console or set environment variables."
        )

    # === Saved Token ===

    def _load_saved_token(self) -> Optional[Credentials]:
        """Load and verify the token file, returns None when re-authorization is needed"""
        if not self.token_path.exists():
            logger.info("No existing token found - authorization required")
            return None

        try:
            creds = Credentials.from_authorized_user_file(str(self.token_path), SCOPES)
        except ValueError as error:
            logger.warning(f"Saved token is unreadable ({error}) - re-authenticating")
            return None

        refreshed = False
        try:
            if creds.expired and creds.refresh_token:
                logger.info("Refreshing expired credentials")
                creds.refresh(Request())
                refreshed = True

            self.service_factory(creds).users().getProfile(userId='me').execute()
        except (HttpError, RefreshError, TransportError, OSError) as error:
            logger.warning(f"Saved token is invalid or expired ({error}) - re-authenticating")
            self.console.print("[yellow]Saved token is invalid or expired. Re-authenticating...[/yellow]")
            return None

        # Only a token that passed the profile check is written back
        if refreshed:
            self._save_token(creds)

        logger.info("Successfully authenticated with existing credentials")
        return creds

    def _save_token(self, creds: Credentials) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(creds.to_json())
        logger.info(f"Token stored to {self.token_path}")

    # === Authorization Flow ===

    def _authorize(self, secrets: ClientSecrets) -> Credentials:
        """Run the authorization-code flow and persist the resulting token"""
        flow = Flow.from_client_config(
            secrets.to_client_config(),
            scopes=SCOPES,
            redirect_uri=secrets.redirect_uri
        )

        auth_url, _ = flow.authorization_url(
            access_type='offline',
            prompt='consent'
        )
        self._print_instructions(auth_url, secrets.redirect_uri)

        code = self.settings.auth_code
        if not code:
            code = self.input_provider('Paste the authorization code here: ').strip()
            if not code:
                raise AuthError("Authorization code is required. Please run again and provide the code.")

        try:
            flow.fetch_token(code=code)
        except Exception as error:
            raise AuthError(f"OAuth token exchange failed: {error}") from error

        creds = flow.credentials
        self._save_token(creds)
        self.console.print(f"Token stored to {self.token_path}")
        return creds

    def _print_instructions(self, auth_url: str, redirect_uri: str) -> None:
        self.console.rule("[bold]Gmail API Authorization Required[/bold]")
        self.console.print("1. Open this URL in your browser:")
        self.console.print(f"   {auth_url}\n", soft_wrap=True, markup=False)
        self.console.print("2. Sign in with your Google account")
        self.console.print("3. Click \"Allow\" to grant access\n")
        self.console.print("4. After authorization, you will be redirected to a page.")
        self.console.print("   Look at the URL in your browser - it will look like:")
        self.console.print(f"   {redirect_uri}?code=4/XXXXXXXXXXXXXXXXXXXXXXXXXXXXX\n", soft_wrap=True, markup=False)
        self.console.print("5. Copy the ENTIRE code value (everything after \"code=\")")
        self.console.print("   and paste it below when prompted.\n")
        self.console.rule()

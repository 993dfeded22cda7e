"""
Gmail Service - Facade for Gmail operations
Handles authentication and hands the authorized client to the searcher and deleter
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from rich.console import Console

from gmail_housekeeping.auth import Authenticator, InputProvider
from gmail_housekeeping.config import Settings
from gmail_housekeeping.deleter import BatchDeleter
from gmail_housekeeping.errors import AuthError, PartialFetchError
from gmail_housekeeping.models import CleanupConfig, CleanupResult, MessageMatch
from gmail_housekeeping.search import MessageSearcher


logger = logging.getLogger(__name__)


def build_gmail_client(creds: Credentials):
    """Build a Gmail v1 API client for the given credentials"""
    return build('gmail', 'v1', credentials=creds, cache_discovery=False)


class GmailService:
    """Facade for Gmail operations - handles auth and delegates to specialized classes"""

    def __init__(
        self,
        settings: Settings,
        console: Optional[Console] = None,
        input_provider: InputProvider = input,
        service_factory: Callable = build_gmail_client
    ):
        self.settings = settings
        self.console = console or Console()
        self.input_provider = input_provider
        self.service_factory = service_factory
        self.service = None

        # Progress callback
        self.progress_callback: Optional[Callable[[str, Dict], None]] = None

        # Fetch failures from the most recent search
        self.fetch_errors: List[PartialFetchError] = []

    def set_progress_callback(self, callback: Callable[[str, Dict], None]):
        """Set callback for progress updates"""
        self.progress_callback = callback

    # === Authentication ===

    def authenticate(self) -> None:
        """Obtain credentials and build the Gmail client, raises AuthError on failure"""
        authenticator = Authenticator(
            self.settings,
            self.service_factory,
            console=self.console,
            input_provider=self.input_provider
        )
        creds = authenticator.authenticate()
        self.service = self.service_factory(creds)
        logger.info("Gmail client ready")

    def _require_service(self):
        if not self.service:
            raise AuthError("Not authenticated. Call authenticate() first.")
        return self.service

    # === Search (delegates to MessageSearcher) ===

    def search_messages(self, config: CleanupConfig) -> List[MessageMatch]:
        """Find messages matching the configured senders and subjects"""
        searcher = MessageSearcher(self._require_service(), self.progress_callback)
        matches = searcher.search(
            senders=config.senders,
            subjects=config.subjects,
            max_results=config.max_results
        )
        self.fetch_errors = searcher.fetch_errors
        return matches

    # === Deletion (delegates to BatchDeleter) ===

    def delete_messages(self, message_ids: Iterable[str], dry_run: bool = False) -> CleanupResult:
        """Delete messages by id, or report what would be deleted"""
        service = self.service if dry_run else self._require_service()
        deleter = BatchDeleter(service, self.progress_callback)
        return deleter.delete_all(message_ids, dry_run=dry_run)

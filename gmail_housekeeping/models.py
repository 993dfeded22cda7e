"""
Shared data models for Gmail Housekeeping
"""

from dataclasses import dataclass, field
from typing import Dict, List

from gmail_housekeeping.config import DEFAULT_MAX_RESULTS
from gmail_housekeeping.errors import ConfigurationError


@dataclass
class CleanupConfig:
    """Configuration for a single cleanup run"""
    senders: List[str] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    max_results: int = DEFAULT_MAX_RESULTS
    dry_run: bool = False
    assume_yes: bool = False

    def validate(self) -> None:
        if not self.senders and not self.subjects:
            raise ConfigurationError("At least one of --senders or --subjects must be specified")
        if self.max_results < 1:
            raise ConfigurationError(f"--max-results must be a positive number, got {self.max_results}")


@dataclass
class ClientSecrets:
    """OAuth client identity used to start the authorization flow"""
    client_id: str
    client_secret: str
    redirect_uri: str
    source: str = 'environment'

    def to_client_config(self) -> Dict:
        """Client config in the shape google_auth_oauthlib expects"""
        return {
            'installed': {
                'client_id': self.client_id,
                'client_secret': self.client_secret,
                'redirect_uris': [self.redirect_uri],
                'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
                'token_uri': 'https://oauth2.googleapis.com/token',
            }
        }


@dataclass(frozen=True)
class MessageMatch:
    """Lightweight metadata for one matching message"""
    id: str
    thread_id: str
    snippet: str
    sender: str = ''
    subject: str = ''


@dataclass
class CleanupResult:
    """Outcome of a deletion pass"""
    total_found: int = 0
    deleted: int = 0
    errors: List[str] = field(default_factory=list)

"""
Runtime settings for Gmail Housekeeping
Values come from the environment (optionally a .env file) with sane defaults
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


# If modifying these scopes, delete the file token.json.
SCOPES = ['https://mail.google.com/']

DEFAULT_CREDENTIALS_PATH = 'credentials.json'
DEFAULT_TOKEN_PATH = 'token.json'
DEFAULT_REDIRECT_URI = 'http://localhost:3000/oauth2callback'
DEFAULT_LOG_LEVEL = 'WARNING'

# Gmail API limits
DEFAULT_MAX_RESULTS = 500
MAX_RESULTS_CAP = 500
BATCH_DELETE_LIMIT = 1000

SNIPPET_LENGTH = 100
PREVIEW_COUNT = 5


@dataclass
class Settings:
    """Paths and OAuth client values resolved from the environment"""
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    token_path: str = DEFAULT_TOKEN_PATH
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    auth_code: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from environ, loading .env first when reading os.environ"""
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            credentials_path=environ.get('GMAIL_CREDENTIALS_PATH', DEFAULT_CREDENTIALS_PATH),
            token_path=environ.get('GMAIL_TOKEN_PATH', DEFAULT_TOKEN_PATH),
            client_id=environ.get('CLIENT_ID') or None,
            client_secret=environ.get('CLIENT_SECRET') or None,
            redirect_uri=environ.get('REDIRECT_URI') or DEFAULT_REDIRECT_URI,
            auth_code=(environ.get('AUTH_CODE') or '').strip() or None,
            log_level=environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL).upper(),
        )

"""
Shared test fixtures for Gmail Housekeeping tests
"""

import pytest
from typing import Dict, List, Optional, Set
from googleapiclient.errors import HttpError

from gmail_housekeeping.config import Settings


# === Mock Gmail API Service ===

class MockExecute:
    """Mock for the .execute() call that returns stored data"""
    def __init__(self, data):
        self._data = data

    def execute(self):
        return self._data


class MockFailingExecute:
    """Mock for an .execute() call that raises an API error"""
    def __init__(self, status: int, reason: str, content: bytes = b'error'):
        self._status = status
        self._reason = reason
        self._content = content

    def execute(self):
        raise make_http_error(self._status, self._reason, self._content)


class MockRaisingExecute:
    """Mock for an .execute() call that fails below the HTTP layer (timeouts, resets)"""
    def __init__(self, error: Exception):
        self._error = error

    def execute(self):
        raise self._error


class MockHttpResponse:
    """Mock HTTP response for HttpError"""
    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason


def make_http_error(status: int, reason: str, content: bytes = b'error') -> HttpError:
    return HttpError(resp=MockHttpResponse(status, reason), content=content)


class MockMessages:
    """Mock for users().messages()"""
    def __init__(self, mailbox: 'MockGmailService'):
        self._mailbox = mailbox

    def list(self, userId: str, q: str = None, maxResults: int = 100, pageToken: Optional[str] = None):
        self._mailbox.list_calls.append({'q': q, 'maxResults': maxResults})
        if self._mailbox.fail_list:
            return MockFailingExecute(500, 'Backend Error')

        messages = self._mailbox.messages[:maxResults]
        result = {'resultSizeEstimate': len(messages)}
        if messages:
            # Only include ids in list response (like real API)
            result['messages'] = [{'id': m['id'], 'threadId': m['threadId']} for m in messages]
        return MockExecute(result)

    def get(self, userId: str, id: str, format: str = None, metadataHeaders: List[str] = None):
        self._mailbox.get_calls.append(id)
        if id in self._mailbox.raise_get:
            return MockRaisingExecute(self._mailbox.raise_get[id])
        if id in self._mailbox.fail_get:
            return MockFailingExecute(404, 'Not Found', b'Message not found')
        return MockExecute(self._mailbox.messages_by_id[id])

    def batchDelete(self, userId: str, body: Dict):
        ids = list(body['ids'])
        call_number = len(self._mailbox.batch_delete_calls) + 1
        self._mailbox.batch_delete_calls.append(ids)
        if call_number in self._mailbox.raise_batches:
            return MockRaisingExecute(self._mailbox.raise_batches[call_number])
        if call_number in self._mailbox.fail_batches:
            return MockFailingExecute(500, 'Backend Error', b'Internal error')
        self._mailbox.deleted_ids.update(ids)
        # batchDelete returns an empty body on success
        return MockExecute('')


class MockUsers:
    """Mock for service.users()"""
    def __init__(self, mailbox: 'MockGmailService'):
        self._mailbox = mailbox

    def messages(self):
        return MockMessages(self._mailbox)

    def getProfile(self, userId: str):
        self._mailbox.profile_calls += 1
        if self._mailbox.profile_error:
            return MockRaisingExecute(self._mailbox.profile_error)
        if self._mailbox.fail_profile:
            return MockFailingExecute(401, 'Unauthorized', b'Invalid Credentials')
        return MockExecute({'emailAddress': 'me@example.com', 'messagesTotal': len(self._mailbox.messages)})


class MockGmailService:
    """Mock Gmail API service that simulates a mailbox"""

    def __init__(
        self,
        messages: List[Dict] = None,
        fail_get: Set[str] = None,
        fail_batches: Set[int] = None,
        fail_list: bool = False,
        fail_profile: bool = False,
        raise_get: Dict[str, Exception] = None,
        raise_batches: Dict[int, Exception] = None,
        profile_error: Exception = None
    ):
        self.messages = messages or []
        self.messages_by_id = {m['id']: m for m in self.messages}
        self.fail_get = fail_get or set()
        self.fail_batches = fail_batches or set()
        self.fail_list = fail_list
        self.fail_profile = fail_profile
        self.raise_get = raise_get or {}
        self.raise_batches = raise_batches or {}
        self.profile_error = profile_error

        # Recorded calls
        self.list_calls: List[Dict] = []
        self.get_calls: List[str] = []
        self.batch_delete_calls: List[List[str]] = []
        self.deleted_ids: Set[str] = set()
        self.profile_calls = 0

    def users(self):
        return MockUsers(self)


# === Helper to create message data ===

def make_message(
    message_id: str,
    sender: str,
    subject: str,
    snippet: str = 'Hello there',
    thread_id: str = None
) -> dict:
    """Helper to create a message dict matching Gmail API metadata format"""
    return {
        'id': message_id,
        'threadId': thread_id or f'thread_{message_id}',
        'labelIds': ['INBOX'],
        'snippet': snippet,
        'payload': {
            'headers': [
                {'name': 'From', 'value': sender},
                {'name': 'Subject', 'value': subject}
            ]
        }
    }


# === Fixtures ===

@pytest.fixture
def sample_messages() -> List[dict]:
    """Ten messages from a couple of noisy senders"""
    return [
        make_message(f'msg_{i:03d}', 'Promo <promo@spam.com>', f'Sale #{i}', snippet=f'Big savings inside {i}')
        for i in range(10)
    ]


@pytest.fixture
def mock_gmail_service(sample_messages) -> MockGmailService:
    """Returns a MockGmailService with the sample messages"""
    return MockGmailService(sample_messages)


@pytest.fixture
def empty_gmail_service() -> MockGmailService:
    """Returns a MockGmailService with an empty mailbox"""
    return MockGmailService([])


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at files inside a temporary directory"""
    return Settings(
        credentials_path=str(tmp_path / 'credentials.json'),
        token_path=str(tmp_path / 'token.json'),
    )

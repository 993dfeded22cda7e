"""
Message Searcher - Finds messages matching sender/subject filters
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from googleapiclient.errors import HttpError

from gmail_housekeeping.config import DEFAULT_MAX_RESULTS, MAX_RESULTS_CAP, SNIPPET_LENGTH
from gmail_housekeeping.errors import PartialFetchError, SearchError
from gmail_housekeeping.models import MessageMatch


logger = logging.getLogger(__name__)


class MessageSearcher:
    """Lists matching messages and fetches preview metadata for each"""

    def __init__(
        self,
        service,  # Gmail API service object
        progress_callback: Optional[Callable[[str, Dict], None]] = None
    ):
        self.service = service
        self.progress_callback = progress_callback

        # Per-message fetch failures from the last search
        self.fetch_errors: List[PartialFetchError] = []

    # === Main Entry Point ===

    def search(
        self,
        senders: Optional[Sequence[str]] = None,
        subjects: Optional[Sequence[str]] = None,
        max_results: Optional[int] = DEFAULT_MAX_RESULTS
    ) -> List[MessageMatch]:
        """Search for messages, returns matches in the order Gmail lists them"""
        query = self.build_query(senders, subjects)
        limit = self.clamp_max_results(max_results)

        self.fetch_errors = []
        self._report_progress("search_started", {"query": query, "max_results": limit})

        candidates = self._list_candidates(query, limit)
        logger.info(f"Listed {len(candidates)} candidate messages for query: {query}")

        matches = []
        for candidate in candidates:
            message_id = candidate.get('id')
            if not message_id:
                continue

            try:
                match = self._get_message_metadata(message_id, candidate.get('threadId', ''))
            except Exception as error:
                fetch_error = PartialFetchError(message_id, error)
                logger.error(str(fetch_error))
                self.fetch_errors.append(fetch_error)
                self._report_progress("fetch_error", {"message_id": message_id, "error": str(error)})
                continue

            matches.append(match)
            self._report_progress("message_fetched", {
                "message_id": message_id,
                "fetched": len(matches),
                "total": len(candidates)
            })

        self._report_progress("search_completed", {
            "matches": len(matches),
            "errors": len(self.fetch_errors)
        })
        return matches

    # === Query Building ===

    @staticmethod
    def build_query(senders: Optional[Sequence[str]] = None, subjects: Optional[Sequence[str]] = None) -> str:
        """Build a Gmail search query, e.g. (from:a OR from:b) AND (subject:"x")"""
        query_parts = []

        sender_terms = [f"from:{sender.strip()}" for sender in senders or [] if sender.strip()]
        if sender_terms:
            query_parts.append(f"({' OR '.join(sender_terms)})")

        subject_terms = [f'subject:"{subject.strip()}"' for subject in subjects or [] if subject.strip()]
        if subject_terms:
            query_parts.append(f"({' OR '.join(subject_terms)})")

        if not query_parts:
            raise SearchError("At least one sender or subject must be specified")

        return ' AND '.join(query_parts)

    @staticmethod
    def clamp_max_results(max_results: Optional[int]) -> int:
        """Missing or non-positive means the default; anything above the API cap is lowered to it"""
        if not max_results or max_results < 1:
            return DEFAULT_MAX_RESULTS
        return min(max_results, MAX_RESULTS_CAP)

    # === API Calls ===

    def _list_candidates(self, query: str, limit: int) -> List[Dict]:
        try:
            results = self.service.users().messages().list(
                userId='me',
                q=query,
                maxResults=limit
            ).execute()
        except HttpError as error:
            raise SearchError(f"Error listing messages: {error}") from error

        return results.get('messages', [])

    def _get_message_metadata(self, message_id: str, thread_id: str) -> MessageMatch:
        """Fetch and parse preview metadata for a single message"""
        message = self.service.users().messages().get(
            userId='me',
            id=message_id,
            format='metadata',
            metadataHeaders=['From', 'Subject']
        ).execute()

        headers = {h['name']: h['value'] for h in message.get('payload', {}).get('headers', [])}
        snippet = message.get('snippet') or ''

        return MessageMatch(
            id=message_id,
            thread_id=thread_id or message.get('threadId', ''),
            snippet=snippet[:SNIPPET_LENGTH],
            sender=headers.get('From', ''),
            subject=headers.get('Subject', '')
        )

    # === Progress ===

    def _report_progress(self, event: str, data: Dict) -> None:
        """Send progress update if callback is set"""
        if self.progress_callback:
            self.progress_callback(event, data)

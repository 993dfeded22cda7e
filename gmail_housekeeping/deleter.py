"""
Batch Deleter - Permanently deletes messages in batchDelete-sized chunks
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from gmail_housekeeping.config import BATCH_DELETE_LIMIT
from gmail_housekeeping.errors import PartialDeleteError
from gmail_housekeeping.models import CleanupResult


logger = logging.getLogger(__name__)


class BatchDeleter:
    """Deletes message ids chunk by chunk, recording failed chunks instead of stopping"""

    def __init__(
        self,
        service,  # Gmail API service object
        progress_callback: Optional[Callable[[str, Dict], None]] = None,
        batch_size: int = BATCH_DELETE_LIMIT
    ):
        self.service = service
        self.progress_callback = progress_callback
        self.batch_size = min(batch_size, BATCH_DELETE_LIMIT)

    # === Main Entry Point ===

    def delete_all(self, message_ids: Iterable[str], dry_run: bool = False) -> CleanupResult:
        """Delete the given messages, or only report them when dry_run is set"""
        ids = list(dict.fromkeys(message_ids))
        result = CleanupResult(total_found=len(ids))

        if dry_run:
            logger.info(f"[DRY RUN] Would delete {len(ids)} emails")
            self._report_progress("would_delete", {"total_found": result.total_found})
            return result

        self._report_progress("delete_started", {
            "total_found": result.total_found,
            "batch_size": self.batch_size
        })

        for chunk_number, chunk in enumerate(self.chunk_ids(ids, self.batch_size), 1):
            try:
                self._batch_delete(chunk)
            except Exception as error:
                delete_error = PartialDeleteError(chunk_number, len(chunk), error)
                logger.error(str(delete_error))
                result.errors.append(str(delete_error))
                self._report_progress("chunk_error", {
                    "chunk": chunk_number,
                    "size": len(chunk),
                    "error": str(delete_error)
                })
                continue

            result.deleted += len(chunk)
            logger.debug(f"Deleted batch {chunk_number}: {len(chunk)} emails")
            self._report_progress("chunk_deleted", {
                "chunk": chunk_number,
                "size": len(chunk),
                "deleted": result.deleted,
                "total_found": result.total_found
            })

        self._report_progress("delete_completed", {
            "total_found": result.total_found,
            "deleted": result.deleted,
            "errors": len(result.errors)
        })
        return result

    # === Chunking ===

    @staticmethod
    def chunk_ids(ids: List[str], size: int) -> List[List[str]]:
        """Split ids into consecutive chunks of at most size, keeping order"""
        return [ids[i:i + size] for i in range(0, len(ids), size)]

    # === API Calls ===

    def _batch_delete(self, chunk: List[str]) -> None:
        self.service.users().messages().batchDelete(
            userId='me',
            body={'ids': chunk}
        ).execute()

    # === Progress ===

    def _report_progress(self, event: str, data: Dict) -> None:
        """Send progress update if callback is set"""
        if self.progress_callback:
            self.progress_callback(event, data)

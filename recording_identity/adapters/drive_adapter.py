"""Adapter for scanning the recordings file store in Google Drive.

Uses Google Drive API with service account authentication to walk
the folder tree and turn standardized recording folders into
Recording objects.
"""

import asyncio
import os

import structlog
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from recording_identity.extraction import parse_folder_name
from recording_identity.models import Recording
from recording_identity.sources import from_file_store

logger = structlog.get_logger()

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Root -> coach -> student -> recording is the deepest layout in use
DEFAULT_MAX_DEPTH = 4


class DriveAdapter:
    """Adapter for reading recording folders from Google Drive.

    Read-only. Follows the established adapter pattern with lazy
    service initialization.
    """

    def __init__(self, credentials_path: str | None = None):
        """Initialize with service account credentials.

        Args:
            credentials_path: Path to service account JSON.
                             Falls back to GOOGLE_CREDENTIALS_PATH env var.
        """
        self._credentials_path = credentials_path or os.environ.get(
            "GOOGLE_CREDENTIALS_PATH"
        )
        self._service = None

    def _get_service(self):
        """Get or create Drive API service.

        Raises:
            ValueError: If no credentials path configured
        """
        if self._service is None:
            if not self._credentials_path:
                raise ValueError(
                    "No credentials. Set GOOGLE_CREDENTIALS_PATH env var "
                    "or pass credentials_path to constructor."
                )
            creds = Credentials.from_service_account_file(
                self._credentials_path,
                scopes=DRIVE_SCOPES,
            )
            self._service = build("drive", "v3", credentials=creds)
        return self._service

    async def scan_recordings(
        self,
        root_folder_id: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> list[Recording]:
        """Collect recording folders below a root folder.

        Args:
            root_folder_id: Google Drive folder ID of the file store root
            max_depth: How many folder levels to descend

        Returns:
            Recordings in traversal order (folders sorted by name per level)

        Raises:
            ValueError: If no credentials path configured
        """
        return await asyncio.to_thread(self._scan_sync, root_folder_id, max_depth)

    def _list_folders(self, folder_id: str) -> list[dict]:
        service = self._get_service()
        query = (
            f"'{folder_id}' in parents and mimeType = '{FOLDER_MIME_TYPE}' "
            "and trashed = false"
        )
        folders: list[dict] = []
        page_token = None
        while True:
            result = (
                service.files()
                .list(
                    q=query,
                    fields="nextPageToken, files(id,name)",
                    orderBy="name",
                    pageSize=1000,
                    pageToken=page_token,
                )
                .execute()
            )
            folders.extend(result.get("files", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return folders

    def _scan_sync(self, root_folder_id: str, max_depth: int) -> list[Recording]:
        """Synchronous depth-first scan."""
        # Configuration errors abort the scan; listing errors skip one folder
        self._get_service()
        recordings: list[Recording] = []
        stack: list[tuple[str, tuple[str, ...], int]] = [(root_folder_id, (), 0)]

        while stack:
            folder_id, ancestors, depth = stack.pop()
            try:
                children = self._list_folders(folder_id)
            except Exception as e:
                logger.warning(
                    "Error listing Drive folder",
                    folder_id=folder_id,
                    error=str(e),
                )
                continue

            subfolders = []
            for child in children:
                name = child.get("name", "")
                if parse_folder_name(name).is_recording_folder:
                    recordings.append(from_file_store(name, ancestors))
                elif depth + 1 < max_depth:
                    subfolders.append((child["id"], (*ancestors, name), depth + 1))
            # Reversed so the stack pops folders in name order
            stack.extend(reversed(subfolders))

        logger.info(
            "Scanned file store",
            root_folder_id=root_folder_id,
            recordings=len(recordings),
        )
        return recordings

    async def health_check(self) -> bool:
        """Check if adapter is properly configured.

        Returns:
            True if credentials can authenticate, False otherwise
        """
        try:
            self._get_service()
            return True
        except Exception:
            return False

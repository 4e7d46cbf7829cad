"""Adapter for loading the coach/student roster from Google Sheets.

The roster tab lists every coach and student in the program, one per row.
Rows are read with gspread and turned into PersonEntry objects that the
name standardizer matches titles and folder names against.
"""

import os

import gspread
import structlog
from google.oauth2.service_account import Credentials

from recording_identity.identity.schemas import PersonEntry, PersonRole

logger = structlog.get_logger()

REQUIRED_COLUMNS = ("Name", "Role")

# Spellings seen in the Role column besides the enum values
ROLE_ALIASES = {
    "mentor": PersonRole.COACH,
    "tutor": PersonRole.COACH,
    "learner": PersonRole.STUDENT,
    "mentee": PersonRole.STUDENT,
}


def parse_role(raw: object) -> PersonRole | None:
    """Map a Role cell onto a PersonRole, or None if unrecognised."""
    text = str(raw or "").strip().lower()
    if not text:
        return None
    try:
        return PersonRole(text)
    except ValueError:
        return ROLE_ALIASES.get(text)


def parse_aliases(raw: object) -> list[str]:
    """Split an Aliases cell on commas or semicolons."""
    text = str(raw or "").replace(";", ",")
    return [alias.strip() for alias in text.split(",") if alias.strip()]


def roster_from_records(records: list[dict]) -> list[PersonEntry]:
    """Build roster entries from sheet records.

    Rows without a name or with an unknown role are skipped. A name that
    appears twice under the same role keeps the first row, with the later
    row's aliases merged in.

    Raises:
        ValueError: If the header lacks a required column
    """
    if not records:
        return []

    missing = [column for column in REQUIRED_COLUMNS if column not in records[0]]
    if missing:
        raise ValueError(
            "Roster sheet must have 'Name' and 'Role' columns. "
            f"Missing: {missing}, found: {list(records[0].keys())}"
        )

    entries: dict[tuple[str, PersonRole], PersonEntry] = {}
    for line, row in enumerate(records, start=2):
        name = str(row.get("Name") or "").strip()
        role = parse_role(row.get("Role"))
        if not name or role is None:
            if name or row.get("Role"):
                logger.warning(
                    "Skipping roster row",
                    line=line,
                    name=name,
                    role=row.get("Role"),
                )
            continue

        aliases = parse_aliases(row.get("Aliases"))
        key = (name.casefold(), role)
        if key in entries:
            existing = entries[key]
            new = [alias for alias in aliases if alias not in existing.aliases]
            merged = existing.aliases + new
            entries[key] = existing.model_copy(update={"aliases": merged})
            continue

        entries[key] = PersonEntry(
            name=name,
            role=role,
            email=str(row.get("Email") or "").strip() or None,
            aliases=aliases,
        )

    return list(entries.values())


class RosterAdapter:
    """Adapter for loading the program roster from Google Sheets.

    Expected sheet format:
    - Required columns: Name, Role (coach/student, or mentor/tutor/learner)
    - Optional columns: Email, Aliases (comma- or semicolon-separated)
    """

    SCOPES = [
        "https://www.googleapis.com/auth/spreadsheets.readonly",
        "https://www.googleapis.com/auth/drive.readonly",
    ]

    def __init__(self, credentials_path: str | None = None):
        """Initialize with service account credentials.

        Args:
            credentials_path: Path to service account JSON.
                             Falls back to GOOGLE_CREDENTIALS_PATH env var.
        """
        self._credentials_path = credentials_path or os.environ.get(
            "GOOGLE_CREDENTIALS_PATH"
        )
        self._client: gspread.Client | None = None

    def _get_client(self) -> gspread.Client:
        """Get or create authenticated gspread client.

        Raises:
            ValueError: If no credentials path configured
        """
        if self._client is None:
            if not self._credentials_path:
                raise ValueError(
                    "No credentials. Set GOOGLE_CREDENTIALS_PATH env var "
                    "or pass credentials_path to constructor."
                )
            creds = Credentials.from_service_account_file(
                self._credentials_path,
                scopes=self.SCOPES,
            )
            self._client = gspread.authorize(creds)
        return self._client

    def load_roster(
        self, spreadsheet_id: str, sheet_name: str = "Roster"
    ) -> list[PersonEntry]:
        """Load roster from Google Sheet.

        Args:
            spreadsheet_id: Google Sheets ID (from URL)
            sheet_name: Name of worksheet (default: "Roster")

        Returns:
            List of PersonEntry objects in sheet order

        Raises:
            ValueError: If required columns missing
        """
        spreadsheet = self._get_client().open_by_key(spreadsheet_id)
        worksheet = spreadsheet.worksheet(sheet_name)
        roster = roster_from_records(worksheet.get_all_records())

        coaches = sum(1 for entry in roster if entry.role is PersonRole.COACH)
        students = len(roster) - coaches
        if roster and (coaches == 0 or students == 0):
            # Name pairs cannot be oriented without both roles
            logger.warning(
                "Roster has only one role",
                spreadsheet_id=spreadsheet_id,
                coaches=coaches,
                students=students,
            )

        logger.info(
            "Loaded roster",
            spreadsheet_id=spreadsheet_id,
            sheet_name=sheet_name,
            coaches=coaches,
            students=students,
        )
        return roster

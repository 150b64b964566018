"""
Google Sheets / Drive service for StaffHub.
Logs submissions to per-organization spreadsheets and provisions new ones.
"""
import asyncio
import logging
from typing import Optional, List, Tuple
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.config import Settings
from app.utils.sheet_rows import TAB_HEADERS

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"


class SheetAccessError(Exception):
    """Google API failure; ``status`` is the upstream HTTP status when known."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def _column_letter(count: int) -> str:
    return chr(64 + count)


class SheetsService:
    """Service-account client for the Sheets v4 and Drive v3 APIs."""

    def __init__(self, config: Settings):
        self.service_account_email = config.google_service_account_email
        # Keys pasted into env files usually carry literal "\n" sequences
        self.private_key = (config.google_private_key or "").replace("\\n", "\n")
        self.default_sheet_id = config.google_sheet_id
        self.drive_folder_id = config.google_drive_folder_id

    @property
    def configured(self) -> bool:
        return bool(self.service_account_email and self.private_key)

    def _credentials(self, scopes: List[str]):
        return service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": self.service_account_email,
                "private_key": self.private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=scopes,
        )

    def _client(self, api: str, version: str, scopes: List[str]):
        return build(api, version, credentials=self._credentials(scopes), cache_discovery=False)

    async def _run(self, func):
        """Run a blocking Google client call in the default executor."""
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, func)
        except HttpError as e:
            raise SheetAccessError(str(e), status=e.resp.status) from e
        except GoogleAuthError as e:
            raise SheetAccessError(f"Google authentication failed: {e}") from e

    async def append_row(self, values: List[str], tab_name: str, sheet_id: Optional[str] = None) -> bool:
        """
        Append one row to a tab.

        Args:
            values: Cell values, first column first
            tab_name: Exact tab title
            sheet_id: Target spreadsheet (defaults to the configured fallback sheet)

        Returns:
            False when credentials or a spreadsheet id are missing, True once appended

        Raises:
            SheetAccessError: if the Sheets API rejects the append
        """
        spreadsheet_id = sheet_id or self.default_sheet_id
        if not self.configured or not spreadsheet_id:
            logger.warning("Google Sheets credentials or sheet id not configured. Skipping sheet update.")
            return False

        sheets = self._client("sheets", "v4", [SHEETS_SCOPE])
        await self._run(
            lambda: sheets.spreadsheets().values().append(
                spreadsheetId=spreadsheet_id,
                range=f"'{tab_name}'!A:A",
                valueInputOption="USER_ENTERED",
                body={"values": [values]},
            ).execute()
        )
        logger.info(f"Appended row to '{tab_name}' in spreadsheet {spreadsheet_id}")
        return True

    async def get_sheet_info(self, sheet_id: str) -> Tuple[str, List[str]]:
        """Return the spreadsheet title and its tab names."""
        if not self.configured:
            raise SheetAccessError("Google credentials not configured")

        sheets = self._client("sheets", "v4", [SHEETS_READONLY_SCOPE])
        response = await self._run(
            lambda: sheets.spreadsheets().get(
                spreadsheetId=sheet_id,
                fields="properties.title,sheets.properties.title",
            ).execute()
        )
        title = response.get("properties", {}).get("title") or "Untitled"
        tabs = [s.get("properties", {}).get("title") for s in response.get("sheets", [])]
        return title, [tab for tab in tabs if tab]

    async def create_organization_sheet(self, organization_name: str, admin_email: str) -> Tuple[str, str]:
        """
        Create "<name> - HR Portal Submissions" with one header row per tab
        and share it with the organization admin.

        Returns:
            (spreadsheet_id, spreadsheet_url)
        """
        if not self.configured:
            raise SheetAccessError("Google credentials not configured")

        scopes = [SHEETS_SCOPE, DRIVE_SCOPE]
        sheets = self._client("sheets", "v4", scopes)
        drive = self._client("drive", "v3", scopes)
        title = f"{organization_name} - HR Portal Submissions"

        spreadsheet_id = None
        spreadsheet_url = None

        # A shared folder often works where a direct create is refused
        if self.drive_folder_id:
            try:
                drive_file = await self._run(
                    lambda: drive.files().create(
                        body={
                            "name": title,
                            "mimeType": SPREADSHEET_MIME_TYPE,
                            "parents": [self.drive_folder_id],
                        },
                        fields="id, webViewLink",
                    ).execute()
                )
                spreadsheet_id = drive_file.get("id")
                spreadsheet_url = drive_file.get("webViewLink")
                await self._add_header_tabs(sheets, spreadsheet_id)
            except SheetAccessError as e:
                logger.warning(f"Drive API create in folder {self.drive_folder_id} failed, trying Sheets API: {e}")

        if not spreadsheet_id:
            spreadsheet = await self._run(
                lambda: sheets.spreadsheets().create(
                    body={"properties": {"title": title}, "sheets": self._tab_definitions()},
                    fields="spreadsheetId,spreadsheetUrl",
                ).execute()
            )
            spreadsheet_id = spreadsheet.get("spreadsheetId")
            spreadsheet_url = spreadsheet.get("spreadsheetUrl")

        if not spreadsheet_id:
            raise SheetAccessError("Failed to create spreadsheet - no ID returned")

        try:
            await self._run(
                lambda: drive.permissions().create(
                    fileId=spreadsheet_id,
                    body={"type": "user", "role": "writer", "emailAddress": admin_email},
                    sendNotificationEmail=True,
                ).execute()
            )
        except SheetAccessError as e:
            logger.error(f"Failed to share spreadsheet {spreadsheet_id} with {admin_email}: {e}")

        spreadsheet_url = spreadsheet_url or f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"
        logger.info(f"Created organization sheet {spreadsheet_id} for {organization_name}")
        return spreadsheet_id, spreadsheet_url

    def _tab_definitions(self) -> List[dict]:
        """Tabs with a frozen bold header row, for a direct Sheets create."""
        return [
            {
                "properties": {
                    "sheetId": index,
                    "title": tab,
                    "gridProperties": {"frozenRowCount": 1},
                },
                "data": [{
                    "startRow": 0,
                    "startColumn": 0,
                    "rowData": [{
                        "values": [
                            {
                                "userEnteredValue": {"stringValue": header},
                                "userEnteredFormat": {
                                    "textFormat": {"bold": True},
                                    "backgroundColor": {"red": 0.9, "green": 0.9, "blue": 0.9},
                                },
                            }
                            for header in headers
                        ]
                    }],
                }],
            }
            for index, (tab, headers) in enumerate(TAB_HEADERS.items())
        ]

    async def _add_header_tabs(self, sheets, spreadsheet_id: str) -> None:
        """Add the tabs and header rows to a spreadsheet created through Drive."""
        requests = []
        for index, tab in enumerate(TAB_HEADERS):
            requests.append({
                "addSheet": {
                    "properties": {
                        "sheetId": 1000 + index,
                        "title": tab,
                        "index": index,
                        "gridProperties": {"frozenRowCount": 1},
                    }
                }
            })
            requests.append({
                "repeatCell": {
                    "range": {"sheetId": 1000 + index, "startRowIndex": 0, "endRowIndex": 1},
                    "cell": {"userEnteredFormat": {"textFormat": {"bold": True}}},
                    "fields": "userEnteredFormat.textFormat.bold",
                }
            })

        try:
            await self._run(
                lambda: sheets.spreadsheets().batchUpdate(
                    spreadsheetId=spreadsheet_id, body={"requests": requests}
                ).execute()
            )
            data = [
                {"range": f"'{tab}'!A1:{_column_letter(len(headers))}1", "values": [headers]}
                for tab, headers in TAB_HEADERS.items()
            ]
            await self._run(
                lambda: sheets.spreadsheets().values().batchUpdate(
                    spreadsheetId=spreadsheet_id,
                    body={"valueInputOption": "RAW", "data": data},
                ).execute()
            )
            # The Drive-created file starts with a default tab at sheetId 0
            await self._run(
                lambda: sheets.spreadsheets().batchUpdate(
                    spreadsheetId=spreadsheet_id,
                    body={"requests": [{"deleteSheet": {"sheetId": 0}}]},
                ).execute()
            )
        except SheetAccessError as e:
            logger.warning(f"Could not set up tabs in {spreadsheet_id} (spreadsheet still created): {e}")

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo

# --------------------------------
# Settings

# Width of the data range read from the sheet (columns A-H)
TOTAL_COLUMNS = 8

# Timezone used when identifying today's date.
# "CST" is the platform's legacy id for US Central time.
TIMEZONE_ID = "CST"
TIMEZONE_ALIASES = {"CST": "America/Chicago"}
TIMEZONE = ZoneInfo(TIMEZONE_ALIASES.get(TIMEZONE_ID, TIMEZONE_ID))

DATE_FORMAT = "%m/%d/%y"

# Template used for the plea email body
EMAIL_TEMPLATE_NAME = "email"

# Neonatal syringe-fed orphans that need to go on the plea (not on hold)
NEONATAL_ANIMAL_TYPE = "Neonatal Orphan"
FOSTER_PLEA_STATUS = "Foster Plea"
SYRINGE_GRUELIES_FEEDING = "SG"

SUBJECT_PREFIX = "Neonatal Foster Plea"
PLEA_HEADING = "Syringe Gruelies (3-6 weeks old)"

DONE_MESSAGE = "Done!"
# --------------------------------


@dataclass
class Settings:
    sheet_url: str | None
    sheet_csv_path: str | None
    gmail_access_token: str | None
    drafts_dir: str | None

    @staticmethod
    def from_env() -> "Settings":
        def optional(name: str) -> str | None:
            value = os.getenv(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        sheet_url = optional("PLEA_SHEET_URL")
        sheet_csv_path = optional("PLEA_SHEET_CSV")
        if sheet_url is None and sheet_csv_path is None:
            raise ValueError("Either PLEA_SHEET_URL or PLEA_SHEET_CSV is required.")

        gmail_access_token = optional("GMAIL_ACCESS_TOKEN")
        drafts_dir = optional("PLEA_DRAFTS_DIR")
        if gmail_access_token is None and drafts_dir is None:
            raise ValueError("Either GMAIL_ACCESS_TOKEN or PLEA_DRAFTS_DIR is required.")

        return Settings(
            sheet_url=sheet_url,
            sheet_csv_path=sheet_csv_path,
            gmail_access_token=gmail_access_token,
            drafts_dir=drafts_dir,
        )

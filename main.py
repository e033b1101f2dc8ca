from __future__ import annotations

import logging
import sys

from foster_plea import config
from foster_plea.drafter import DraftError, build_draft_service
from foster_plea.email_formatter import HtmlTemplateRenderer
from foster_plea.orchestrator import create_neonatal_sg_draft_plea_email
from foster_plea.sheet_client import CsvFileSheet, GoogleSheetClient, SheetSource


def build_sheet(settings: config.Settings) -> SheetSource:
    if settings.sheet_url:
        return GoogleSheetClient(settings.sheet_url)
    return CsvFileSheet(settings.sheet_csv_path or "")


def close_resource(resource: object) -> None:
    close = getattr(resource, "close", None)
    if close is not None:
        close()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    try:
        settings = config.Settings.from_env()
        drafts = build_draft_service(
            gmail_access_token=settings.gmail_access_token,
            drafts_dir=settings.drafts_dir,
        )
    except (ValueError, DraftError) as exc:
        logging.error("Missing configuration: %s", exc)
        sys.exit(1)

    try:
        sheet = build_sheet(settings)
    except ValueError as exc:
        close_resource(drafts)
        logging.error("Missing configuration: %s", exc)
        sys.exit(1)

    try:
        create_neonatal_sg_draft_plea_email(
            sheet=sheet,
            renderer=HtmlTemplateRenderer(),
            drafts=drafts,
        )
    except Exception as exc:  # noqa: BLE001
        logging.exception("Draft plea run failed: %s", exc)
        sys.exit(1)
    finally:
        for resource in (sheet, drafts):
            close_resource(resource)


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .config import (
    DONE_MESSAGE,
    FOSTER_PLEA_STATUS,
    NEONATAL_ANIMAL_TYPE,
    SUBJECT_PREFIX,
    SYRINGE_GRUELIES_FEEDING,
    TOTAL_COLUMNS,
)
from .drafter import DraftService
from .email_formatter import TemplateRenderer, build_email_subject, create_plea_email_body
from .models import PleaEntry, PleaFilter
from .sheet_client import SheetSource
from .utils import entries_from_rows, filter_entries, format_today, utc_now

logger = logging.getLogger(__name__)

NEONATAL_SG_FILTER = PleaFilter(
    animal_type=NEONATAL_ANIMAL_TYPE,
    status=FOSTER_PLEA_STATUS,
    feeding_notes=SYRINGE_GRUELIES_FEEDING,
)


def get_plea_entries_from_sheet(sheet: SheetSource) -> List[PleaEntry]:
    """Reads every row in the sheet and generates a list of plea entries."""
    max_rows = sheet.get_max_rows()
    rows = sheet.get_values(1, 1, max_rows, TOTAL_COLUMNS) if max_rows > 0 else []
    entries = entries_from_rows(rows)
    logger.info("Read %s plea entries from %s rows", len(entries), len(rows))
    return entries


def get_today(now: Optional[datetime] = None) -> str:
    return format_today(now or utc_now())


def create_draft_plea_email(
    subject_title: str,
    plea_entries: Sequence[PleaEntry],
    *,
    renderer: TemplateRenderer,
    drafts: DraftService,
    now: Optional[datetime] = None,
) -> None:
    """Creates one draft plea email; nothing is submitted if the body fails to render."""
    subject = build_email_subject(subject_title, get_today(now))
    html_body = create_plea_email_body(renderer, plea_entries)
    drafts.create_draft("", subject, "", html_body=html_body)
    logger.info("Created draft subject=%r via %s", subject, drafts.provider)


def create_neonatal_sg_draft_plea_email(
    *,
    sheet: SheetSource,
    renderer: TemplateRenderer,
    drafts: DraftService,
    now: Optional[datetime] = None,
) -> List[PleaEntry]:
    """
    Creates a draft foster plea email for only Syringe Gruelies Neonatal
    Orphans that need to go on the plea (not on hold).
    """
    filtered = filter_entries(get_plea_entries_from_sheet(sheet), NEONATAL_SG_FILTER.matches)
    logger.info("Matched %s neonatal SG plea entries", len(filtered))

    create_draft_plea_email(SUBJECT_PREFIX, filtered, renderer=renderer, drafts=drafts, now=now)

    logger.info(DONE_MESSAGE)
    return filtered

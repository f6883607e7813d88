"""
Page layout schemas.

The portal markup has no semantic structure for most values, so fields are
read by cell position or fixed element id. All positions and selectors are
kept here; a markup change on the portal should only require editing this
module.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from tarjouspalvelu.core.errors import RequiredFieldMissing
from tarjouspalvelu.core.extract.html import HtmlElement, row_cells


# =============================================================================
# Row Schemas
# =============================================================================


@dataclass(frozen=True)
class DpsRowSchema:
    """Cell positions of a dynamic purchasing system row."""

    unit: int = 0
    custom_id: int = 1
    title: int = 2
    description: int = 3
    deadline: int = 4
    link: int = 6


@dataclass(frozen=True)
class NoticeRowSchema:
    """Cell positions of a notice row.

    The title cell also holds the flag icons and the type tags.
    """

    custom_id: int = 0
    unit: int = 1
    title: int = 2
    description: int = 3
    deadline: int = 4
    link: int = 6


DPS_ROW = DpsRowSchema()
NOTICE_ROW = NoticeRowSchema()


class RowReader:
    """Read the cells of a table row by schema field name."""

    def __init__(self, row: HtmlElement, schema: DpsRowSchema | NoticeRowSchema, entity: str):
        self.cells = row_cells(row)
        self.schema = schema
        self.entity = entity

        width = max(getattr(schema, f.name) for f in fields(schema)) + 1
        if len(self.cells) < width:
            raise RequiredFieldMissing(
                f"{entity} row",
                f"Failed to read {entity} row, expected {width} cells but got {len(self.cells)}",
            )

    def cell(self, name: str) -> HtmlElement:
        return self.cells[getattr(self.schema, name)]

    def text(self, name: str) -> str:
        return self.cell(name).text_content().strip()


# =============================================================================
# Selectors
# =============================================================================


# Portal index page
COMPANY_CELLS = "tr > td"
COMPANY_IMAGE_PATH = "/Default/Image/"

# Notices page
DPS_TABLE = "#DPSIlmoituslista"
NOTICE_TABLE = "#ctl00_PageContent_GridView1"
DPS_CORRECTION_MARKER = "punainenfontti"
NOTICE_CORRECTION_COLOR = "red"
NOTICE_ID_PARAM = "tpID"

# Notice processing page
PROCESSING_FLAG_ICONS = 'img[align="absmiddle"]'
PROCESSING_TYPE_TAGS = 'span[class*="harmaa"]'

# Notice details page
DETAIL_FIELDS = {
    "custom_id": "#valHankTunniste",
    "published": "#valIlmPaiva",
    "deadline": "#valDueDate",
    "unit": "#valHankYksMarkNimi",
    "title": "#valHankNimi",
    "description": "#valKuvaus",
    "authority_type": "#valHankYksLuo",
    "category": "#valHankLaj",
}

# Notice attachments page
ATTACHMENT_LINKS = 'a[id*="TiedostoLinkki"]'
EXTERNAL_LINKS = 'a[id*="HyperLink1"]'
ATTACHMENT_DOWNLOAD_PREFIX = "../Document/Open/?fileType=TarjPyynTied&id="

# WebForms state fields
EVENT_VALIDATION = "__EVENTVALIDATION"
VIEW_STATE = "__VIEWSTATE"

# Company page
PROCUREMENT_ORGANIZATION_INPUT = 'input[id$="HankOrgIdHidden"]'

# In-progress tenders page
TENDER_MODIFY_LINK = "#ctl00_PageContent_GridView1_ctl02_hlModify"
TENDER_ID_PARAM = "tarjID"

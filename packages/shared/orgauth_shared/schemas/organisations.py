"""
Organisation schemas.

Covers: organisation create request, membership add request, and the
organisation views returned by the API.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from .common import CamelModel, TextInputModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(TextInputModel):
    name: str
    description: Optional[str] = None


class MemberAddRequest(TextInputModel):
    user_id: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(CamelModel):
    org_id: uuid.UUID = Field(
        validation_alias=AliasChoices("id", "orgId", "org_id"),
        serialization_alias="orgId",
    )
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrgListData(CamelModel):
    organisations: List[OrgResponse]

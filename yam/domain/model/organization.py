"""Organization and mailroom entities (read-only for redemption)."""

from typing import Optional

from yam.domain.model.common import DomainModel
from yam.domain.value import MailroomId, OrganizationId, Slug


class Organization(DomainModel):
    id: OrganizationId
    name: str
    slug: Optional[Slug] = None


class Mailroom(DomainModel):
    id: MailroomId
    organization_id: OrganizationId
    name: str
    slug: Optional[Slug] = None

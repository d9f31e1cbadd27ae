"""Tests for the contact page."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.db.models import Tenant
from inmo_api.db.repositories import AdvisorRepository
from inmo_api.schemas.common import PageContext
from inmo_api.services.contact_service import (
    CONTACT_OG_IMAGE,
    DEFAULT_ADDRESS,
    DEFAULT_PHONE,
    ContactService,
    contact_info,
    service_options,
)

from tests.backend.support.factories import make_advisor, settle


def test_contact_info_falls_back_to_office_defaults() -> None:
    info = contact_info({"email": "ventas@clic.do"}, "fr")

    assert info.main.phone == DEFAULT_PHONE
    assert info.main.email == "ventas@clic.do"
    assert info.main.address == DEFAULT_ADDRESS
    assert info.offices[0].phone == DEFAULT_PHONE
    assert info.hours.sunday == "Dimanche: Fermé"


def test_service_options_keep_their_order() -> None:
    options = service_options("en")

    assert [option.value for option in options] == [
        "asesor",
        "vender",
        "desarrollo",
        "comprar",
        "otro",
    ]
    assert options[3].label == "I want to buy"


@pytest.mark.asyncio
async def test_contact_page_uses_tenant_contact_and_team(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_advisor(session, tenant, whatsapp="8290000000")
    await settle(session)
    english = context.model_copy(update={"language": "en"})

    page = await ContactService(AdvisorRepository(session)).get_page(english)

    assert page.type == "contact"
    assert page.contact_info.main.phone == "+1 809 555 0100"
    assert page.contact_info.main.email == "info@clic.do"
    assert [member.name for member in page.team] == ["Juan Pérez"]
    assert page.team[0].whatsapp == "8290000000"
    assert page.team[0].title == "Asesor Senior"
    assert len(page.services) == 5
    assert page.seo.canonical_url == "/en/contact"
    assert page.seo.og_image == CONTACT_OG_IMAGE
    entity = page.seo.structured_data["mainEntity"]
    assert entity["telephone"] == "+1 809 555 0100"
    assert entity["address"]["addressCountry"] == "DO"

"""Contact page payload."""

from __future__ import annotations

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage


class TeamMember(CamelModel):
    id: str
    name: str
    title: str
    phone: str = ""
    email: str = ""
    whatsapp: str = ""
    avatar: str = ""
    specialties: list[str] = Field(default_factory=list)
    slug: str = ""


class MainContact(CamelModel):
    phone: str
    whatsapp: str
    email: str
    address: str


class OfficeCoordinates(CamelModel):
    lat: float
    lng: float


class Office(CamelModel):
    name: str
    address: str
    city: str
    phone: str
    coordinates: OfficeCoordinates


class OfficeHours(CamelModel):
    weekdays: str
    saturday: str
    sunday: str


class ContactInfo(CamelModel):
    main: MainContact
    offices: list[Office] = Field(default_factory=list)
    hours: OfficeHours


class ServiceOption(CamelModel):
    value: str
    label: str


class ContactPage(ContentPage):
    type: str = "contact"
    contact_info: ContactInfo
    team: list[TeamMember] = Field(default_factory=list)
    services: list[ServiceOption] = Field(default_factory=list)

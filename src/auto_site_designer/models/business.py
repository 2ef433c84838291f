from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SiteInfo(_Frozen):
    id: str | None = None
    name: str | None = None
    domain: str | None = None
    description: str | None = None
    timezone: str | None = None
    language: str = "en"


class ClientInfo(_Frozen):
    company: str | None = None
    industry: str | None = None
    description: str | None = None
    tagline: str | None = None
    notes: str | None = None


class Branding(_Frozen):
    business_name: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    heading_font: str | None = None
    body_font: str | None = None


class Address(_Frozen):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None

    def one_line(self) -> str:
        return ", ".join(part for part in (self.street, self.city, self.state, self.zip, self.country) if part)


class ContactInfo(_Frozen):
    email: EmailStr | None = None
    phone: str | None = None
    address: Address | None = None


class TeamMember(_Frozen):
    name: str
    role: str | None = None
    bio: str | None = None
    image_url: str | None = None


class Testimonial(_Frozen):
    author: str
    content: str
    rating: int | None = Field(default=None, ge=1, le=5)
    company: str | None = None


class Service(_Frozen):
    name: str
    description: str | None = None
    price: str | None = None
    category: str | None = None


class PortfolioItem(_Frozen):
    title: str
    image_url: str | None = None
    description: str | None = None


class FaqItem(_Frozen):
    question: str
    answer: str


class Location(_Frozen):
    name: str
    address: Address | None = None
    phone: str | None = None


class BusinessHours(_Frozen):
    day: str
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False


class SocialLink(_Frozen):
    platform: str
    url: str


class DataAvailability(_Frozen):
    has_team: bool = False
    has_testimonials: bool = False
    has_services: bool = False
    has_portfolio: bool = False
    has_faq: bool = False
    has_locations: bool = False
    has_hours: bool = False
    has_social: bool = False
    has_logo: bool = False
    has_contact: bool = False


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    if isinstance(value, BaseModel):
        return any(is_present(item) for item in value.model_dump().values())
    return True


class BusinessDataContext(_Frozen):
    """Read-only snapshot of everything known about the business."""

    site: SiteInfo = Field(default_factory=SiteInfo)
    client: ClientInfo = Field(default_factory=ClientInfo)
    branding: Branding = Field(default_factory=Branding)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    team: Sequence[TeamMember] = Field(default_factory=tuple)
    testimonials: Sequence[Testimonial] = Field(default_factory=tuple)
    services: Sequence[Service] = Field(default_factory=tuple)
    portfolio: Sequence[PortfolioItem] = Field(default_factory=tuple)
    faq: Sequence[FaqItem] = Field(default_factory=tuple)
    locations: Sequence[Location] = Field(default_factory=tuple)
    hours: Sequence[BusinessHours] = Field(default_factory=tuple)
    social: Sequence[SocialLink] = Field(default_factory=tuple)

    @property
    def business_name(self) -> str:
        candidates = (self.branding.business_name, self.client.company, self.site.name)
        return next((name.strip() for name in candidates if is_present(name)), "Your Business")

    def availability(self) -> DataAvailability:
        return DataAvailability(
            has_team=bool(self.team),
            has_testimonials=bool(self.testimonials),
            has_services=bool(self.services),
            has_portfolio=bool(self.portfolio),
            has_faq=bool(self.faq),
            has_locations=bool(self.locations) or is_present(self.contact.address),
            has_hours=bool(self.hours),
            has_social=bool(self.social),
            has_logo=is_present(self.branding.logo_url),
            has_contact=is_present(self.contact.email) or is_present(self.contact.phone),
        )

    def data_sources_used(self) -> list[str]:
        names = ("team", "testimonials", "services", "portfolio", "faq", "locations", "hours", "social")
        return [name for name in names if getattr(self, name)]

    def lookup(self, path: str) -> Any:
        """Resolve a dotted data-source path such as ``contact.email``.

        ``business_name`` is a virtual path. Unknown segments resolve to None.
        """
        if path == "business_name":
            return self.business_name
        value: Any = self
        for segment in path.split("."):
            if value is None:
                return None
            if isinstance(value, BaseModel):
                value = getattr(value, segment, None)
            elif isinstance(value, dict):
                value = value.get(segment)
            elif isinstance(value, (list, tuple)) and segment.isdigit():
                index = int(segment)
                value = value[index] if index < len(value) else None
            else:
                return None
        if isinstance(value, BaseModel):
            if isinstance(value, Address):
                return value.one_line() or None
            return value.model_dump(mode="json")
        if isinstance(value, (list, tuple)):
            return [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in value]
        return value


__all__ = [
    "Address",
    "Branding",
    "BusinessDataContext",
    "BusinessHours",
    "ClientInfo",
    "ContactInfo",
    "DataAvailability",
    "FaqItem",
    "Location",
    "PortfolioItem",
    "Service",
    "SiteInfo",
    "SocialLink",
    "TeamMember",
    "Testimonial",
    "is_present",
]

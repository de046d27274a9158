"""Site configuration domain models."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class ApiSite:
    """One upstream videolist API."""

    key: str
    api: str
    name: str
    detail: str | None = None
    disabled: bool = False


@dataclass(frozen=True)
class CustomCategory:
    """A browse category backed by a catalog query."""

    name: str
    kind: Literal["movie", "tv"]
    query: str


@dataclass(frozen=True)
class UserPolicy:
    """Per-user source restriction; ``None`` means all enabled sites."""

    username: str
    enabled_apis: frozenset[str] | None = None


@dataclass(frozen=True)
class SiteConfig:
    """Parsed site configuration file."""

    api_sites: list[ApiSite] = field(default_factory=list)
    custom_categories: list[CustomCategory] = field(default_factory=list)
    users: dict[str, UserPolicy] = field(default_factory=dict)
    cache_time: int | None = None
    disable_content_filter: bool | None = None

    def sites_for(self, username: str) -> list[ApiSite]:
        """Enabled sites visible to ``username``, in declaration order."""
        policy = self.users.get(username)
        sites = [site for site in self.api_sites if not site.disabled]
        if policy is None or policy.enabled_apis is None:
            return sites
        return [site for site in sites if site.key in policy.enabled_apis]

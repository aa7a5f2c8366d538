"""Template values available to descriptor placeholders."""

from __future__ import annotations

from dataclasses import dataclass, replace

CONVEX_CLOUD_DOMAIN = ".convex.cloud"
CONVEX_SITE_DOMAIN = ".convex.site"


def derive_site_url(
    url: str,
    cloud_domain: str = CONVEX_CLOUD_DOMAIN,
    site_domain: str = CONVEX_SITE_DOMAIN,
) -> str:
    """Map a deployment URL to its HTTP-actions URL (``.convex.cloud`` -> ``.convex.site``)."""
    return url.replace(cloud_domain, site_domain)


@dataclass(frozen=True)
class TemplateContext:
    """Immutable snapshot of the placeholder values.

    The resolver threads a context through each step and replaces it when the
    backend URL changes, so text rendered earlier keeps the values it was
    rendered with.
    """

    convex_url: str
    convex_site_url: str
    cloud_domain: str = CONVEX_CLOUD_DOMAIN
    site_domain: str = CONVEX_SITE_DOMAIN

    @classmethod
    def from_backend_url(
        cls,
        url: str,
        cloud_domain: str = CONVEX_CLOUD_DOMAIN,
        site_domain: str = CONVEX_SITE_DOMAIN,
    ) -> "TemplateContext":
        return cls(
            convex_url=url,
            convex_site_url=derive_site_url(url, cloud_domain, site_domain),
            cloud_domain=cloud_domain,
            site_domain=site_domain,
        )

    def with_backend_url(self, url: str) -> "TemplateContext":
        """Return a new context pointing at *url*; ``self`` is unchanged."""
        return replace(
            self,
            convex_url=url,
            convex_site_url=derive_site_url(url, self.cloud_domain, self.site_domain),
        )

    def values(self) -> dict[str, str]:
        return {"convexUrl": self.convex_url, "convexSiteUrl": self.convex_site_url}

    def extended(self, name: str, value: str) -> dict[str, str]:
        """Placeholder values plus one extra ``{{name}}`` entry."""
        values = self.values()
        values[name] = value
        return values

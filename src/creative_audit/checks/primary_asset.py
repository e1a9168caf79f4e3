"""primaryAsset — entry document named index.html with an ad.size meta tag.

Profiles: CM360
Priority: required
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from ..parsing.document import parse_html
from .base import CheckContext, Priority, Profile, make_finding

_INDEX_NAMES = ("index.html", "index.htm")


def has_ad_size_meta(html_text: str, path: str) -> bool:
    doc = parse_html(html_text, path)
    return any(
        (meta.get("name") or "").strip().lower() == "ad.size" for meta in doc.find_all("meta", "name")
    )


class PrimaryAssetCheck:
    """Primary HTML must be index.html and declare its size."""

    id = "primaryAsset"
    title = "Primary HTML Asset"
    description = "CM360: the entry file must be index.html with <meta name=\"ad.size\">."
    profiles = frozenset({Profile.CM360})
    priority = Priority.REQUIRED
    tags = frozenset({"packaging", "size", "cm360"})

    def execute(self, context: CheckContext) -> Finding:
        path = context.primary_path
        partial = context.partial
        messages: list[str] = []
        offenders: list[FindingOffender] = []

        if context.entry_name.lower() not in _INDEX_NAMES:
            messages.append(f"Primary file is {context.entry_name}, expected index.html")
            offenders.append(
                FindingOffender(path, "Rename the entry file to index.html", None, OffenderCategory.PACKAGING)
            )

        if not has_ad_size_meta(context.html_text, path):
            if partial.ad_size is not None and partial.ad_size_source is not None:
                method = partial.ad_size_source.method.value
                messages.append(f"Size {partial.ad_size} inferred via {method}, but no ad.size meta tag")
            else:
                messages.append("Primary HTML missing ad.size meta tag")
            offenders.append(
                FindingOffender(path, 'No <meta name="ad.size"> found', None, OffenderCategory.CODE)
            )
        elif partial.ad_size is None:
            messages.append("ad.size meta tag present but its content could not be parsed")
            offenders.append(
                FindingOffender(path, 'Expected content="width=W,height=H"', None, OffenderCategory.CODE)
            )

        if offenders:
            return make_finding(self, Severity.FAIL, messages, offenders)

        return make_finding(
            self,
            Severity.PASS,
            [f"Primary asset {path} with dimensions {partial.ad_size}"],
        )

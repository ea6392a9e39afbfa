from __future__ import annotations

from reporter_match.config.outlets import OUTLET_REGISTRY, OutletType, Region

NEWSLETTER_KEYWORDS = ("substack", "newsletter")
TRADE_KEYWORDS = ("dive", "trade", "journal of")
REGIONAL_KEYWORDS = ("times", "herald", "tribune")

UK_KEYWORDS = ("uk", "british", "london")
EU_KEYWORDS = ("europe", "eu")


def classify_outlet(outlet_name: str) -> OutletType:
    known = OUTLET_REGISTRY.get(outlet_name)
    if known is not None:
        return known.outlet_type

    lower = outlet_name.lower()
    if _contains_any(lower, NEWSLETTER_KEYWORDS):
        return OutletType.NEWSLETTER
    if _contains_any(lower, TRADE_KEYWORDS):
        return OutletType.TRADE_SPECIALIST
    if _contains_any(lower, REGIONAL_KEYWORDS):
        return OutletType.REGIONAL
    # most indexed outlets are mainstream publications
    return OutletType.NATIONAL_BUSINESS_TECH


def classify_geography(outlet_name: str) -> Region:
    known = OUTLET_REGISTRY.get(outlet_name)
    if known is not None:
        return known.region

    lower = outlet_name.lower()
    if _contains_any(lower, UK_KEYWORDS):
        return Region.UK
    if _contains_any(lower, EU_KEYWORDS):
        return Region.EU
    return Region.US


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)

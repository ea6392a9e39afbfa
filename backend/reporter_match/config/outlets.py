from dataclasses import dataclass
from enum import StrEnum


class OutletType(StrEnum):
    NATIONAL_BUSINESS_TECH = "national_business_tech"
    TRADE_SPECIALIST = "trade_specialist"
    REGIONAL = "regional"
    NEWSLETTER = "newsletter"
    PODCAST = "podcast"


class Region(StrEnum):
    """Primary coverage area of an outlet, stored on each article."""

    US = "us"
    UK = "uk"
    EU = "eu"
    GLOBAL = "global"


class GeographyFilter(StrEnum):
    """User-facing geography selection, expanded into a set of regions at query time."""

    US = "us"
    US_EU_UK = "us_eu_uk"
    GLOBAL = "global"


@dataclass(frozen=True)
class OutletConfig:
    name: str
    outlet_type: OutletType
    region: Region


def _outlet(name: str, outlet_type: OutletType, region: Region) -> tuple[str, OutletConfig]:
    return name, OutletConfig(name=name, outlet_type=outlet_type, region=region)


_NATIONAL = OutletType.NATIONAL_BUSINESS_TECH
_TRADE = OutletType.TRADE_SPECIALIST

OUTLET_REGISTRY: dict[str, OutletConfig] = dict(
    [
        # National business / tech
        _outlet("Bloomberg", _NATIONAL, Region.US),
        _outlet("Reuters", _NATIONAL, Region.GLOBAL),
        _outlet("The Wall Street Journal", _NATIONAL, Region.US),
        _outlet("CNBC", _NATIONAL, Region.US),
        _outlet("The New York Times", _NATIONAL, Region.US),
        _outlet("The Washington Post", _NATIONAL, Region.US),
        _outlet("BBC News", _NATIONAL, Region.UK),
        _outlet("CNN", _NATIONAL, Region.US),
        _outlet("The Guardian", _NATIONAL, Region.UK),
        _outlet("Financial Times", _NATIONAL, Region.UK),
        _outlet("Forbes", _NATIONAL, Region.US),
        _outlet("Business Insider", _NATIONAL, Region.US),
        _outlet("TechCrunch", _NATIONAL, Region.US),
        _outlet("The Verge", _NATIONAL, Region.US),
        _outlet("Wired", _NATIONAL, Region.US),
        _outlet("Ars Technica", _NATIONAL, Region.US),
        _outlet("Engadget", _NATIONAL, Region.US),
        _outlet("The Information", _NATIONAL, Region.US),
        _outlet("Fortune", _NATIONAL, Region.US),
        _outlet("Inc.", _NATIONAL, Region.US),
        # Trade / specialist
        _outlet("CleanTechnica", _TRADE, Region.US),
        _outlet("Electrek", _TRADE, Region.US),
        _outlet("Restaurant Dive", _TRADE, Region.US),
        _outlet("Restaurant Business", _TRADE, Region.US),
        _outlet("Nation's Restaurant News", _TRADE, Region.US),
        _outlet("American Banker", _TRADE, Region.US),
        _outlet("Finextra", _TRADE, Region.UK),
        _outlet("Robotics and Automation News", _TRADE, Region.EU),
        _outlet("The Robot Report", _TRADE, Region.US),
        _outlet("GreenBiz", _TRADE, Region.US),
        _outlet("Utility Dive", _TRADE, Region.US),
        _outlet("Energy Storage News", _TRADE, Region.EU),
        _outlet("HousingWire", _TRADE, Region.US),
        _outlet("National Mortgage News", _TRADE, Region.US),
        _outlet("Mortgage Professional America", _TRADE, Region.US),
        _outlet("BankingDive", _TRADE, Region.US),
        _outlet("Automation World", _TRADE, Region.US),
        # Regional
        _outlet("The Boston Globe", OutletType.REGIONAL, Region.US),
        _outlet("San Francisco Chronicle", OutletType.REGIONAL, Region.US),
        _outlet("Chicago Tribune", OutletType.REGIONAL, Region.US),
        _outlet("Los Angeles Times", OutletType.REGIONAL, Region.US),
        _outlet("The Dallas Morning News", OutletType.REGIONAL, Region.US),
        _outlet("The Seattle Times", OutletType.REGIONAL, Region.US),
        # Newsletters
        _outlet("Substack", OutletType.NEWSLETTER, Region.GLOBAL),
        _outlet("The Hustle", OutletType.NEWSLETTER, Region.US),
        _outlet("Morning Brew", OutletType.NEWSLETTER, Region.US),
        _outlet("Axios", OutletType.NEWSLETTER, Region.US),
        _outlet("Semafor", OutletType.NEWSLETTER, Region.US),
    ]
)

GEOGRAPHY_REGIONS: dict[GeographyFilter, frozenset[Region] | None] = {
    GeographyFilter.US: frozenset({Region.US}),
    GeographyFilter.US_EU_UK: frozenset({Region.US, Region.UK, Region.EU}),
    # no restriction
    GeographyFilter.GLOBAL: None,
}

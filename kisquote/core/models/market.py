"""Market-related enums and types."""

from enum import Enum


class Market(str, Enum):
    """Market or exchange code used to route quote requests."""

    KRX = "KRX"  # domestic (KOSPI/KOSDAQ)
    NYS = "NYS"
    NAS = "NAS"
    AMS = "AMS"
    HKS = "HKS"
    TSE = "TSE"
    SHS = "SHS"
    SZS = "SZS"
    HSX = "HSX"
    HNX = "HNX"
    US = "US"  # US index universe, not an exchange

    @property
    def is_domestic(self) -> bool:
        return self is Market.KRX


class InstrumentClass(str, Enum):
    """Instrument class; ETFs are quoted as equities."""

    EQUITY = "equity"
    INDEX = "index"


class EtfCategory(str, Enum):
    INDEX = "index"
    LEVERAGE = "leverage"
    SECTOR = "sector"
    OVERSEAS = "overseas"
    BOND = "bond"


class StockSector(str, Enum):
    TECH = "tech"
    FINANCE = "finance"
    HEALTHCARE = "healthcare"
    CONSUMER = "consumer"
    ENERGY = "energy"
    INDUSTRIAL = "industrial"
    TELECOM = "telecom"
    MATERIALS = "materials"
    UTILITIES = "utilities"
    REALESTATE = "realestate"

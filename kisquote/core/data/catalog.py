"""Static instrument catalogs served by the batch endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from kisquote.core.models import (
    EtfCategory,
    InstrumentClass,
    InstrumentRef,
    Market,
    StockSector,
)


@dataclass(frozen=True)
class EtfInfo:
    symbol: str
    name: str
    category: EtfCategory
    issuer: str

    @property
    def ref(self) -> InstrumentRef:
        return InstrumentRef(symbol=self.symbol, market=Market.KRX)


@dataclass(frozen=True)
class StockInfo:
    symbol: str
    name: str
    sector: StockSector
    exchange: Market

    @property
    def ref(self) -> InstrumentRef:
        return InstrumentRef(symbol=self.symbol, market=self.exchange)


@dataclass(frozen=True)
class IndexInfo:
    code: str
    name: str
    market: Market

    @property
    def ref(self) -> InstrumentRef:
        return InstrumentRef(symbol=self.code, market=self.market, instrument_class=InstrumentClass.INDEX)


_C = EtfCategory
KOREAN_ETFS: tuple[EtfInfo, ...] = (
    # index trackers
    EtfInfo("069500", "KODEX 200", _C.INDEX, "삼성"),
    EtfInfo("102110", "TIGER 200", _C.INDEX, "미래에셋"),
    EtfInfo("229200", "KODEX 코스닥150", _C.INDEX, "삼성"),
    EtfInfo("251340", "KODEX 코스닥150선물인버스", _C.INDEX, "삼성"),
    EtfInfo("148020", "KBSTAR 200", _C.INDEX, "KB"),
    EtfInfo("292150", "TIGER TOP10", _C.INDEX, "미래에셋"),
    # leverage / inverse
    EtfInfo("122630", "KODEX 레버리지", _C.LEVERAGE, "삼성"),
    EtfInfo("252670", "KODEX 200선물인버스2X", _C.LEVERAGE, "삼성"),
    EtfInfo("114800", "KODEX 인버스", _C.LEVERAGE, "삼성"),
    EtfInfo("233740", "KODEX 코스닥150레버리지", _C.LEVERAGE, "삼성"),
    EtfInfo("123320", "TIGER 레버리지", _C.LEVERAGE, "미래에셋"),
    EtfInfo("123310", "TIGER 인버스", _C.LEVERAGE, "미래에셋"),
    # sector / theme
    EtfInfo("091230", "TIGER 반도체", _C.SECTOR, "미래에셋"),
    EtfInfo("305720", "KODEX 2차전지산업", _C.SECTOR, "삼성"),
    EtfInfo("091180", "KODEX 자동차", _C.SECTOR, "삼성"),
    EtfInfo("140710", "KODEX 운송", _C.SECTOR, "삼성"),
    EtfInfo("266370", "KODEX 바이오", _C.SECTOR, "삼성"),
    EtfInfo("139260", "TIGER 금융", _C.SECTOR, "미래에셋"),
    # overseas indices
    EtfInfo("360750", "TIGER 미국S&P500", _C.OVERSEAS, "미래에셋"),
    EtfInfo("379810", "KODEX 미국나스닥100TR", _C.OVERSEAS, "삼성"),
    EtfInfo("371460", "TIGER 차이나전기차SOLACTIVE", _C.OVERSEAS, "미래에셋"),
    EtfInfo("143850", "TIGER 미국S&P500선물(H)", _C.OVERSEAS, "미래에셋"),
    EtfInfo("133690", "TIGER 미국나스닥100", _C.OVERSEAS, "미래에셋"),
    EtfInfo("381180", "TIGER 미국테크TOP10 INDXX", _C.OVERSEAS, "미래에셋"),
    # bonds / commodities
    EtfInfo("148070", "KOSEF 국고채10년", _C.BOND, "키움"),
    EtfInfo("132030", "KODEX 골드선물(H)", _C.BOND, "삼성"),
    EtfInfo("261220", "KODEX WTI원유선물(H)", _C.BOND, "삼성"),
    EtfInfo("130730", "KOSEF 단기자금", _C.BOND, "키움"),
)

_S = StockSector
_NAS, _NYS = Market.NAS, Market.NYS
US_STOCKS: tuple[StockInfo, ...] = (
    StockInfo("AAPL", "Apple", _S.TECH, _NAS),
    StockInfo("MSFT", "Microsoft", _S.TECH, _NAS),
    StockInfo("GOOGL", "Alphabet (Google)", _S.TECH, _NAS),
    StockInfo("AMZN", "Amazon", _S.TECH, _NAS),
    StockInfo("NVDA", "NVIDIA", _S.TECH, _NAS),
    StockInfo("META", "Meta Platforms", _S.TECH, _NAS),
    StockInfo("TSLA", "Tesla", _S.TECH, _NAS),
    StockInfo("AVGO", "Broadcom", _S.TECH, _NAS),
    StockInfo("ORCL", "Oracle", _S.TECH, _NYS),
    StockInfo("CRM", "Salesforce", _S.TECH, _NYS),
    StockInfo("ADBE", "Adobe", _S.TECH, _NAS),
    StockInfo("AMD", "Advanced Micro Devices", _S.TECH, _NAS),
    StockInfo("INTC", "Intel", _S.TECH, _NAS),
    StockInfo("CSCO", "Cisco Systems", _S.TECH, _NAS),
    StockInfo("NFLX", "Netflix", _S.TECH, _NAS),
    StockInfo("QCOM", "Qualcomm", _S.TECH, _NAS),
    StockInfo("JPM", "JPMorgan Chase", _S.FINANCE, _NYS),
    StockInfo("V", "Visa", _S.FINANCE, _NYS),
    StockInfo("MA", "Mastercard", _S.FINANCE, _NYS),
    StockInfo("BAC", "Bank of America", _S.FINANCE, _NYS),
    StockInfo("WFC", "Wells Fargo", _S.FINANCE, _NYS),
    StockInfo("GS", "Goldman Sachs", _S.FINANCE, _NYS),
    StockInfo("AXP", "American Express", _S.FINANCE, _NYS),
    StockInfo("UNH", "UnitedHealth Group", _S.HEALTHCARE, _NYS),
    StockInfo("JNJ", "Johnson & Johnson", _S.HEALTHCARE, _NYS),
    StockInfo("LLY", "Eli Lilly", _S.HEALTHCARE, _NYS),
    StockInfo("PFE", "Pfizer", _S.HEALTHCARE, _NYS),
    StockInfo("ABBV", "AbbVie", _S.HEALTHCARE, _NYS),
    StockInfo("MRK", "Merck & Co.", _S.HEALTHCARE, _NYS),
    StockInfo("TMO", "Thermo Fisher Scientific", _S.HEALTHCARE, _NYS),
    StockInfo("WMT", "Walmart", _S.CONSUMER, _NYS),
    StockInfo("HD", "Home Depot", _S.CONSUMER, _NYS),
    StockInfo("KO", "Coca-Cola", _S.CONSUMER, _NYS),
    StockInfo("PEP", "PepsiCo", _S.CONSUMER, _NAS),
    StockInfo("MCD", "McDonald's", _S.CONSUMER, _NYS),
    StockInfo("NKE", "Nike", _S.CONSUMER, _NYS),
    StockInfo("COST", "Costco", _S.CONSUMER, _NAS),
    StockInfo("SBUX", "Starbucks", _S.CONSUMER, _NAS),
    StockInfo("XOM", "ExxonMobil", _S.ENERGY, _NYS),
    StockInfo("CVX", "Chevron", _S.ENERGY, _NYS),
    StockInfo("CAT", "Caterpillar", _S.INDUSTRIAL, _NYS),
    StockInfo("BA", "Boeing", _S.INDUSTRIAL, _NYS),
    StockInfo("UPS", "United Parcel Service", _S.INDUSTRIAL, _NYS),
    StockInfo("RTX", "Raytheon Technologies", _S.INDUSTRIAL, _NYS),
    StockInfo("HON", "Honeywell", _S.INDUSTRIAL, _NAS),
    StockInfo("GE", "General Electric", _S.INDUSTRIAL, _NYS),
    StockInfo("VZ", "Verizon", _S.TELECOM, _NYS),
    StockInfo("T", "AT&T", _S.TELECOM, _NYS),
)

US_INDICES: tuple[IndexInfo, ...] = (
    IndexInfo("SPX", "S&P 500", Market.US),
    IndexInfo("CCMP", "NASDAQ Composite", Market.US),
    IndexInfo("INDU", "Dow Jones Industrial", Market.US),
    IndexInfo("RUT", "Russell 2000", Market.US),
)

DOMESTIC_INDICES: tuple[IndexInfo, ...] = (
    IndexInfo("0001", "코스피", Market.KRX),
    IndexInfo("1001", "코스닥", Market.KRX),
    IndexInfo("2001", "코스피200", Market.KRX),
    IndexInfo("3003", "KRX300", Market.KRX),
)

DOMESTIC_INDEX_NAMES: dict[str, str] = {info.code: info.name for info in DOMESTIC_INDICES}
US_INDEX_NAMES: dict[str, str] = {info.code: info.name for info in US_INDICES}

ALL_CATEGORY = "all"


def etfs_by_category(category: EtfCategory | str = ALL_CATEGORY) -> list[EtfInfo]:
    """Return the ETFs of ``category`` (``"all"`` returns the full list).

    Raises:
        ValueError: unknown category
    """
    if category == ALL_CATEGORY:
        return list(KOREAN_ETFS)
    wanted = EtfCategory(category)
    return [etf for etf in KOREAN_ETFS if etf.category is wanted]


def stocks_by_sector(sector: StockSector | str | None = None) -> list[StockInfo]:
    """Return the US stocks of ``sector``; ``None`` or ``"all"`` returns every stock.

    Raises:
        ValueError: unknown sector
    """
    if sector is None or sector == ALL_CATEGORY:
        return list(US_STOCKS)
    wanted = StockSector(sector)
    return [stock for stock in US_STOCKS if stock.sector is wanted]


def find_us_stock(symbol: str) -> StockInfo | None:
    symbol = symbol.strip().upper()
    return next((stock for stock in US_STOCKS if stock.symbol == symbol), None)


def find_etf(symbol: str) -> EtfInfo | None:
    return next((etf for etf in KOREAN_ETFS if etf.symbol == symbol.strip()), None)

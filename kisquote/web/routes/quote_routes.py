"""
Quote API routes.

Batch endpoints always answer 200 with whatever subset succeeded; only
batch-wide conditions (missing credentials, no access token) and request
validation produce non-200 responses.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from kisquote.core.data import catalog
from kisquote.core.exceptions import ErrorCode
from kisquote.core.logging import get_logger
from kisquote.core.models import EtfCategory, Market, StockSector
from kisquote.core.services import QuoteService, batch_payload, describe_quote
from kisquote.web.utils import bad_request, get_quote_service

router = APIRouter()
logger = get_logger(__name__)

_ETF_CATEGORIES = [catalog.ALL_CATEGORY, *(category.value for category in EtfCategory)]
_STOCK_SECTORS = [catalog.ALL_CATEGORY, *(sector.value for sector in StockSector)]
_OVERSEAS_EXCHANGES = [market.value for market in Market if not market.is_domestic and market is not Market.US]


@router.get("/etf/prices")
async def get_etf_prices(
    category: str = Query(catalog.ALL_CATEGORY, description="all, index, leverage, sector, overseas, bond"),
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, Any]:
    """Current prices of the Korean ETF catalog, optionally filtered by category."""
    if category not in _ETF_CATEGORIES:
        bad_request(ErrorCode.INVALID_CATEGORY, f"category must be one of {', '.join(_ETF_CATEGORIES)}")

    result = await service.fetch_etf_prices(category)
    return batch_payload(result, category=category)


@router.get("/overseas/indices")
async def get_overseas_indices(service: QuoteService = Depends(get_quote_service)) -> dict[str, Any]:
    """SPX, CCMP, INDU and RUT, estimated from proxy ETFs where upstream reports zero."""
    result = await service.fetch_us_indices()
    return batch_payload(result)


@router.get("/overseas/stock/prices")
async def get_overseas_stock_prices(
    sector: str = Query(catalog.ALL_CATEGORY, description="all or a sector name such as tech, finance"),
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, Any]:
    """Current prices of the US large-cap list."""
    if sector not in _STOCK_SECTORS:
        bad_request(ErrorCode.INVALID_SECTOR, f"sector must be one of {', '.join(_STOCK_SECTORS)}")

    result = await service.fetch_us_stocks(sector)
    return batch_payload(result, sector=sector)


@router.get("/index/price")
async def get_index_price(
    index_code: str | None = Query(None, alias="indexCode", description="0001, 1001, 2001 or 3003"),
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, Any]:
    """Current value of one domestic index."""
    if not index_code:
        bad_request(ErrorCode.MISSING_INDEX_CODE, "indexCode is required")
    if index_code not in catalog.DOMESTIC_INDEX_NAMES:
        valid = ", ".join(catalog.DOMESTIC_INDEX_NAMES)
        bad_request(ErrorCode.INVALID_INDEX_CODE, f"indexCode must be one of {valid}")

    quote = await service.fetch_domestic_index(index_code)
    return describe_quote(quote)


@router.get("/stock/price")
async def get_stock_price(
    symbol: str | None = Query(None, description="6-digit KRX code, e.g. 005930"),
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, Any]:
    """Current price of one domestic stock or ETF."""
    if not symbol or not symbol.strip():
        bad_request(ErrorCode.MISSING_SYMBOL, "symbol is required")

    quote = await service.fetch_stock(symbol)
    return describe_quote(quote)


@router.get("/overseas/stock/price")
async def get_overseas_stock_price(
    symbol: str | None = Query(None, description="Ticker, e.g. AAPL"),
    exchange: str | None = Query(None, description="NAS, NYS, AMS, ... (defaults to the catalog entry)"),
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, Any]:
    """Current price of one overseas stock."""
    if not symbol or not symbol.strip():
        bad_request(ErrorCode.MISSING_SYMBOL, "symbol is required")
    if exchange is not None and exchange.upper() not in _OVERSEAS_EXCHANGES:
        bad_request(ErrorCode.INVALID_EXCHANGE, f"exchange must be one of {', '.join(_OVERSEAS_EXCHANGES)}")

    quote = await service.fetch_overseas_stock(symbol, exchange.upper() if exchange else None)
    return describe_quote(quote)

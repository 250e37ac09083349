"""Korea Investment & Securities (KIS) Open API quote client."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from kisquote.core.config.settings import KISConfig
from kisquote.core.data.catalog import DOMESTIC_INDEX_NAMES, US_INDEX_NAMES
from kisquote.core.data.providers.base import QuoteClient, RawQuote
from kisquote.core.data.providers.token import TokenManager
from kisquote.core.exceptions import AuthenticationError, ConfigurationError, UpstreamError
from kisquote.core.logging import get_logger
from kisquote.core.models import InstrumentRef

DOMESTIC_STOCK_PATH = "/uapi/domestic-stock/v1/quotations/inquire-price"
DOMESTIC_INDEX_PATH = "/uapi/domestic-stock/v1/quotations/inquire-index-price"
OVERSEAS_STOCK_PATH = "/uapi/overseas-price/v1/quotations/price"
OVERSEAS_INDEX_PATH = "/uapi/overseas-price/v1/quotations/inquire-time-indexchartprice"

TR_DOMESTIC_STOCK = "FHKST01010100"
TR_DOMESTIC_INDEX = "FHPUP02100000"
TR_OVERSEAS_STOCK = "HHDFS00000300"
TR_OVERSEAS_INDEX = "FHKST03030200"

# expired / invalid token answers delivered as business errors
_TOKEN_ERROR_CODES = frozenset({"EGW00121", "EGW00123"})
# overseas sign codes: 3 falling, 5 lower limit
_FALLING_SIGNS = frozenset({"3", "5"})

logger = get_logger(__name__)


def parse_decimal(value: Any) -> Decimal:
    """Parse an upstream numeric string; missing or garbage values become zero."""
    if value is None:
        return Decimal("0")
    try:
        parsed = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


def _signed(value: Decimal, sign: str | None) -> Decimal:
    if sign in _FALLING_SIGNS:
        return -abs(value)
    return value


class KISQuoteClient(QuoteClient):
    """Quote client routing each instrument to the matching KIS endpoint."""

    def __init__(
        self,
        config: KISConfig,
        *,
        http: httpx.AsyncClient | None = None,
        tokens: TokenManager | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=config.base_url, timeout=config.request_timeout)
        self.tokens = tokens or TokenManager(self._http, config.app_key, config.app_secret)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def ensure_ready(self) -> None:
        if not self.config.has_credentials:
            raise ConfigurationError("KIS API credentials are not configured")
        await self.tokens.get_token()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def get_quote(self, instrument: InstrumentRef) -> RawQuote:
        if instrument.market.is_domestic:
            if instrument.is_index:
                return await self._domestic_index(instrument.symbol)
            return await self._domestic_stock(instrument.symbol)
        if instrument.is_index:
            return await self._overseas_index(instrument.symbol)
        return await self._overseas_stock(instrument.symbol, instrument.market.value)

    async def _request(self, path: str, tr_id: str, params: dict[str, str]) -> dict[str, Any]:
        if not self.config.has_credentials:
            raise ConfigurationError("KIS API credentials are not configured")
        token = await self.tokens.get_token()
        headers = {
            "content-type": "application/json; charset=utf-8",
            "authorization": f"Bearer {token}",
            "appkey": self.config.app_key,
            "appsecret": self.config.app_secret,
            "tr_id": tr_id,
        }
        response = await self._http.get(path, params=params, headers=headers)

        if response.status_code == 401:
            self.tokens.invalidate()
            raise AuthenticationError("Access token expired or invalid", details={"status_code": 401})
        response.raise_for_status()

        body = response.json()
        if body.get("rt_cd") != "0":
            msg_cd = body.get("msg_cd")
            message = body.get("msg1") or "KIS API error"
            if msg_cd in _TOKEN_ERROR_CODES:
                self.tokens.invalidate()
                raise AuthenticationError(message, details={"msg_cd": msg_cd})
            logger.bind(error_code=msg_cd).warning(f"KIS business error on {tr_id}: {message}")
            raise UpstreamError(message, msg_cd=msg_cd, details={"tr_id": tr_id})
        return body

    async def _domestic_stock(self, symbol: str) -> RawQuote:
        body = await self._request(
            DOMESTIC_STOCK_PATH,
            TR_DOMESTIC_STOCK,
            {"FID_COND_MRKT_DIV_CODE": "J", "FID_INPUT_ISCD": symbol},
        )
        output = body.get("output") or {}
        return RawQuote(
            current_value=parse_decimal(output.get("stck_prpr")),
            change=parse_decimal(output.get("prdy_vrss")),
            change_percent=parse_decimal(output.get("prdy_ctrt")),
            observed_at=self._clock(),
        )

    async def _domestic_index(self, code: str) -> RawQuote:
        body = await self._request(
            DOMESTIC_INDEX_PATH,
            TR_DOMESTIC_INDEX,
            {"FID_COND_MRKT_DIV_CODE": "U", "FID_INPUT_ISCD": code},
        )
        output = body.get("output") or {}
        return RawQuote(
            current_value=parse_decimal(output.get("bstp_nmix_prpr")),
            change=parse_decimal(output.get("bstp_nmix_prdy_vrss")),
            change_percent=parse_decimal(output.get("bstp_nmix_prdy_ctrt")),
            observed_at=self._clock(),
            label=DOMESTIC_INDEX_NAMES.get(code),
        )

    async def _overseas_stock(self, symbol: str, exchange: str) -> RawQuote:
        body = await self._request(
            OVERSEAS_STOCK_PATH,
            TR_OVERSEAS_STOCK,
            {"AUTH": "", "EXCD": exchange, "SYMB": symbol},
        )
        output = body.get("output") or {}
        sign = output.get("sign")
        return RawQuote(
            current_value=parse_decimal(output.get("last")),
            change=_signed(parse_decimal(output.get("diff")), sign),
            change_percent=_signed(parse_decimal(output.get("rate")), sign),
            observed_at=self._clock(),
        )

    async def _overseas_index(self, code: str) -> RawQuote:
        body = await self._request(
            OVERSEAS_INDEX_PATH,
            TR_OVERSEAS_INDEX,
            {
                "FID_COND_MRKT_DIV_CODE": "N",
                "FID_INPUT_ISCD": code,
                "FID_HOUR_CLS_CODE": "0",
                "FID_PW_DATA_INCU_YN": "Y",
            },
        )
        output = body.get("output1") or {}
        sign = output.get("prdy_vrss_sign")
        return RawQuote(
            current_value=parse_decimal(output.get("ovrs_nmix_prpr")),
            change=_signed(parse_decimal(output.get("ovrs_nmix_prdy_vrss")), sign),
            change_percent=_signed(parse_decimal(output.get("prdy_ctrt")), sign),
            observed_at=self._clock(),
            label=US_INDEX_NAMES.get(code),
        )


__all__ = ["KISQuoteClient", "parse_decimal"]

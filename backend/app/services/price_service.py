"""Market quotes from Yahoo Finance and the price refresh of the asset ledger."""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.redis_client import cache_quote, get_cached_quote
from app.models.asset import Asset

logger = logging.getLogger(__name__)


@dataclass
class Quote:
    """Latest price and trailing-year dividend for one ticker."""

    symbol: str
    price: float
    dividend_per_share: float
    currency: str
    name: Optional[str] = None


class PriceService:
    """Quote provider backed by the Yahoo Finance chart API."""

    YAHOO_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, use_cache: bool = True):
        self.http_client = http_client or httpx.AsyncClient(
            timeout=settings.QUOTE_HTTP_TIMEOUT,
            headers={
                "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
                "Accept": "application/json",
            },
        )
        self.use_cache = use_cache

    async def close(self):
        """Close HTTP client."""
        await self.http_client.aclose()

    async def _fetch_chart(self, symbol: str) -> Optional[dict]:
        response = await self.http_client.get(
            f"{self.YAHOO_BASE_URL}/{symbol}",
            params={"range": "1y", "interval": "1d", "events": "div"},
        )
        response.raise_for_status()
        results = (response.json().get("chart") or {}).get("result") or []
        return results[0] if results else None

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        """Fetch a quote; None when the ticker is unknown or the call fails."""
        if self.use_cache:
            cached = await get_cached_quote(ticker)
            if cached:
                return Quote(**cached)

        try:
            chart = await self._fetch_chart(ticker)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching quote for {ticker}: {e}")
            return None

        meta = (chart or {}).get("meta") or {}
        price = meta.get("regularMarketPrice")
        if not price:
            logger.warning(f"No price found for {ticker}")
            return None

        one_year_ago = time.time() - 365 * 86400
        dividends = ((chart.get("events") or {}).get("dividends") or {}).values()
        dividend = sum(
            d.get("amount", 0.0) for d in dividends if d.get("date", 0) >= one_year_ago
        )

        currency = meta.get("currency") or "EUR"
        if currency == "GBp":
            # London listings are quoted in pence
            price, dividend, currency = price / 100, dividend / 100, "GBP"

        quote = Quote(
            symbol=ticker,
            price=float(price),
            dividend_per_share=float(dividend),
            currency=currency,
            name=meta.get("shortName") or meta.get("longName"),
        )
        if self.use_cache:
            await cache_quote(ticker, asdict(quote))
        logger.debug(f"Fetched quote for {ticker}: {quote.price} {quote.currency}")
        return quote

    async def get_quotes(self, tickers: Iterable[str]) -> Dict[str, Quote]:
        """Fetch quotes in batches, pausing between batches to avoid rate limiting."""
        unique: List[str] = list(dict.fromkeys(t for t in tickers if t))
        results: Dict[str, Quote] = {}
        batch_size = max(1, settings.QUOTE_BATCH_SIZE)

        for start in range(0, len(unique), batch_size):
            batch = unique[start:start + batch_size]
            quotes = await asyncio.gather(*(self.get_quote(t) for t in batch))
            for ticker, quote in zip(batch, quotes):
                if quote:
                    results[ticker] = quote
            if start + batch_size < len(unique):
                await asyncio.sleep(settings.QUOTE_BATCH_DELAY_SECONDS)

        return results

    async def get_eur_rate(self, currency: str) -> Optional[float]:
        """Units of EUR per unit of ``currency``."""
        if currency.upper() == "EUR":
            return 1.0
        quote = await self.get_quote(f"{currency.upper()}EUR=X")
        return quote.price if quote else None

    async def convert_to_eur(
        self, amount: float, from_currency: str, rates: Optional[Dict[str, float]] = None
    ) -> float:
        """Convert to EUR. Identity for EUR; unconverted when no rate is available."""
        if not from_currency or from_currency.upper() == "EUR":
            return amount

        rate = rates.get(from_currency) if rates is not None else None
        if rate is None:
            rate = await self.get_eur_rate(from_currency)
            if rate is None:
                logger.error(f"No EUR rate for {from_currency}, keeping unconverted amount")
                return amount
            if rates is not None:
                rates[from_currency] = rate
        return amount * rate

    async def apply_quote(
        self, asset: Asset, quote: Quote, rates: Optional[Dict[str, float]] = None
    ) -> dict:
        """Write a quote onto an asset (unit value, total, dividend)."""
        price_eur = await self.convert_to_eur(quote.price, quote.currency, rates)
        dividend_eur = await self.convert_to_eur(quote.dividend_per_share, quote.currency, rates)

        change = {
            "ticker": asset.ticker,
            "old_value": asset.current_value,
            "new_value": price_eur,
            "old_amount": asset.current_amount,
            "new_amount": (asset.quantity or 0.0) * price_eur,
        }
        asset.current_value = price_eur
        asset.current_amount = change["new_amount"]
        asset.dividend_per_share = dividend_eur
        return change

    async def refresh_prices(self, db: AsyncSession, auto_only: bool = False) -> dict:
        """Refresh every asset with a ticker (only auto-refresh ones if asked)."""
        query = select(Asset).where(Asset.ticker.isnot(None), Asset.ticker != "")
        if auto_only:
            query = query.where(Asset.auto_refresh.is_(True))
        assets = (await db.execute(query)).scalars().all()

        if not assets:
            return {"message": "No assets to refresh", "updated": 0, "total": 0}

        quotes = await self.get_quotes(a.ticker for a in assets)
        rates: Dict[str, float] = {}
        updated = 0
        for asset in assets:
            quote = quotes.get(asset.ticker)
            if not quote:
                logger.info(f"No quote found for {asset.ticker}")
                continue
            await self.apply_quote(asset, quote, rates)
            updated += 1

        await db.commit()
        logger.info(f"Refreshed prices for {updated}/{len(assets)} assets")
        return {"message": "Prices refreshed", "updated": updated, "total": len(assets)}


# Singleton instance
price_service = PriceService()

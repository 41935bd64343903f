from prophyt.adapters.coingecko import CoinGeckoClient, PriceQuote
from prophyt.adapters.errors import PriceFeedError

__all__ = ["CoinGeckoClient", "PriceFeedError", "PriceQuote"]

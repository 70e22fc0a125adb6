"""
Exchange Adapters - Binance Spot REST Client.

============================================================
PURPOSE
============================================================
Blocking VenueClient for the Binance spot REST API (v3).

FEATURES:
- HMAC-SHA256 request signing
- Bounded retries on transport faults and non-fatal HTTP codes
- Error payloads raised as VenueApiError
- Undecodable responses raised as VenueRequestError

============================================================
"""

import hashlib
import hmac
import logging
import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

import requests

from .config import NetworkConfig
from .logging_utils import mask_params
from .venue import (
    CancelOrderRequest,
    NewOrderRequest,
    OpenOrdersRequest,
    VenueApiError,
    VenueClient,
    VenueRequestError,
)


logger = logging.getLogger(__name__)


BINANCE_REST_URL = "https://api.binance.com"


class BinanceRestClient(VenueClient):
    """
    Binance spot REST client.

    One requests.Session per client; every call blocks until the
    venue responds or the configured timeout expires.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        network_config: Optional[NetworkConfig] = None,
        base_url: str = BINANCE_REST_URL,
        session: Optional[requests.Session] = None,
        retry_delay_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize Binance client.

        Args:
            api_key: API key
            api_secret: API secret
            network_config: Timeout and retry settings
            base_url: REST base URL
            session: Session to use (tests inject a mock)
            retry_delay_seconds: Initial delay between retries, doubled each attempt
            clock: Time source for request timestamps
        """
        self._api_key = api_key
        self._api_secret = api_secret
        self._network = network_config or NetworkConfig()
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._retry_delay = retry_delay_seconds
        self._clock = clock

        self._session.headers.update({"X-MBX-APIKEY": self._api_key})

    # --------------------------------------------------------
    # MARKET DATA
    # --------------------------------------------------------

    def get_order_book(self, symbol: str, limit: int) -> Dict[str, Any]:
        return self._request("GET", "/api/v3/depth", {"symbol": symbol, "limit": limit})

    def get_24hr_price_statistics(self, symbol: str) -> Dict[str, Any]:
        return self._request("GET", "/api/v3/ticker/24hr", {"symbol": symbol})

    # --------------------------------------------------------
    # ORDERS
    # --------------------------------------------------------

    def get_open_orders(self, request: OpenOrdersRequest) -> List[Dict[str, Any]]:
        params = {"symbol": request.symbol, "recvWindow": request.recv_window}
        return self._request("GET", "/api/v3/openOrders", params, signed=True)

    def new_order(self, request: NewOrderRequest) -> Dict[str, Any]:
        return self._request("POST", "/api/v3/order", request.to_params(), signed=True)

    def cancel_order(self, request: CancelOrderRequest) -> Dict[str, Any]:
        params = {
            "symbol": request.symbol,
            "orderId": request.order_id,
            "recvWindow": request.recv_window,
        }
        return self._request("DELETE", "/api/v3/order", params, signed=True)

    # --------------------------------------------------------
    # ACCOUNT
    # --------------------------------------------------------

    def get_account(self) -> Dict[str, Any]:
        return self._request("GET", "/api/v3/account", {}, signed=True)

    # --------------------------------------------------------
    # INTERNAL
    # --------------------------------------------------------

    def sign(self, query_string: str) -> str:
        """HMAC-SHA256 hex signature of a query string."""
        return hmac.new(
            self._api_secret.encode(),
            query_string.encode(),
            hashlib.sha256,
        ).hexdigest()

    def _signed_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        signed = dict(params)
        signed["timestamp"] = str(int(self._clock() * 1000))
        signed["signature"] = self.sign(urlencode(signed))
        return signed

    def _is_non_fatal(self, error: requests.RequestException) -> bool:
        if isinstance(error, (requests.ConnectionError, requests.Timeout)):
            return True
        text = str(error)
        return any(fragment in text for fragment in self._network.non_fatal_error_messages)

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any],
        signed: bool = False,
    ) -> Any:
        """Make API request, retrying transient failures."""
        url = f"{self._base_url}{path}"
        attempts = self._network.max_retries + 1
        delay = self._retry_delay

        for attempt in range(1, attempts + 1):
            # Re-sign each attempt so the timestamp stays inside recvWindow
            query = self._signed_params(params) if signed else dict(params)
            logger.debug(f"{method} {path} attempt={attempt} params={mask_params(query)}")

            try:
                response = self._session.request(
                    method,
                    url,
                    params=query if method != "POST" else None,
                    data=query if method == "POST" else None,
                    timeout=self._network.connection_timeout,
                )
            except requests.RequestException as e:
                if attempt < attempts and self._is_non_fatal(e):
                    logger.warning(f"{method} {path} failed ({e}), retrying in {delay:.1f}s")
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise

            if response.status_code in self._network.non_fatal_error_codes and attempt < attempts:
                logger.warning(
                    f"{method} {path} returned HTTP {response.status_code}, retrying in {delay:.1f}s"
                )
                time.sleep(delay)
                delay *= 2
                continue

            return self._parse(response)

        # Unreachable: the last attempt always returns or raises
        raise VenueRequestError(f"{method} {path} exhausted retries")

    @staticmethod
    def _parse(response: requests.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            raise VenueRequestError(
                f"Invalid response from venue (HTTP {response.status_code}): {response.text[:200]}"
            ) from None

        if not 200 <= response.status_code < 300:
            if isinstance(data, dict):
                code = data.get("code", -1)
                message = data.get("msg", "Unknown error")
            else:
                code, message = -1, str(data)
            raise VenueApiError(code, message, response.status_code)

        return data

"""HTTP client for the Google Maps geocoding and distance matrix services."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Sequence

import httpx

from ...config import settings
from ...models.domain import Location
from .models import SOURCE_GOOGLE, ZERO_EDGE, DistanceEdge, DistanceMatrix

logger = logging.getLogger(__name__)

# Distance Matrix request limits: origins x destinations elements, and addresses per side.
DEFAULT_MAX_ELEMENTS_PER_REQUEST = 100
DEFAULT_MAX_DIMENSION_PER_REQUEST = 25


class GeodataError(Exception):
    """Raised when the geodata provider cannot deliver a usable response."""


class GeodataUnavailableError(GeodataError):
    """Raised when no provider credential is configured."""


class GeodataTransportError(GeodataError):
    """Raised when the provider cannot be reached (timeouts, connection failures)."""


def synthesize_location(
    rng: random.Random,
    latitude: float,
    longitude: float,
    jitter_degrees: float,
) -> Location:
    """Return a point near the service region reference, offset by at most ``jitter_degrees``."""
    return Location(
        latitude=latitude + rng.uniform(-jitter_degrees, jitter_degrees),
        longitude=longitude + rng.uniform(-jitter_degrees, jitter_degrees),
        synthesized=True,
    )


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        geocode_url: str | None = None,
        distance_matrix_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        region_latitude: float | None = None,
        region_longitude: float | None = None,
        jitter_degrees: float | None = None,
        max_elements: int = DEFAULT_MAX_ELEMENTS_PER_REQUEST,
        max_dimension: int = DEFAULT_MAX_DIMENSION_PER_REQUEST,
        rng: random.Random | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise GeodataUnavailableError("Google Maps API key is not configured.")
        self.geocode_url = geocode_url or settings.google_geocode_url
        self.distance_matrix_url = distance_matrix_url or settings.google_distance_matrix_url
        self.timeout = timeout if timeout is not None else settings.geodata_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geodata_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geodata_backoff_seconds
        self.region_latitude = region_latitude if region_latitude is not None else settings.service_region_latitude
        self.region_longitude = region_longitude if region_longitude is not None else settings.service_region_longitude
        self.jitter_degrees = jitter_degrees if jitter_degrees is not None else settings.geocode_jitter_degrees
        self.max_elements = max_elements
        self.max_dimension = max_dimension
        self.rng = rng or random.Random()
        self.transport = transport
        self.unreachable = False

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self.transport,
        )

    def _get_json(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        """GET ``url`` and return the decoded JSON body, retrying transient failures."""
        query = {**params, "key": self.api_key}
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise GeodataError("Provider returned a non-object JSON payload.")
                    return data
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    attempt += 1
                    if status_code < 500 or attempt > self.max_retries:
                        raise GeodataError(f"Provider request failed with HTTP {status_code}.") from e
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeodataTransportError(
                            f"Provider unreachable after {attempt} attempt(s): {type(e).__name__}"
                        ) from e
                    logger.debug(f"Geodata request failed, retrying (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(self.backoff_seconds * attempt)
                except ValueError as e:
                    raise GeodataError("Provider returned malformed JSON.") from e
                except httpx.HTTPError as e:
                    raise GeodataError(f"Provider request failed: {type(e).__name__}") from e
        finally:
            client.close()

    def geocode_live(self, address: str) -> Location:
        """Geocode ``address`` with the provider. Raises ``GeodataError`` on any failure."""
        data = self._get_json(self.geocode_url, {"address": address})
        status = data.get("status")
        results = data.get("results")
        if status != "OK" or not results:
            raise GeodataError(f"Geocoding returned status {status!r} for address.")
        try:
            point = results[0]["geometry"]["location"]
            return Location(latitude=float(point["lat"]), longitude=float(point["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GeodataError("Geocoding result has no usable geometry.location.") from e

    def _synthesize(self) -> Location:
        return synthesize_location(self.rng, self.region_latitude, self.region_longitude, self.jitter_degrees)

    def geocode(self, address: str) -> Location:
        """Geocode ``address``, substituting a synthesized service-region point on failure.

        Once the provider has proved unreachable, later calls synthesize
        without issuing further requests.
        """
        if self.unreachable:
            return self._synthesize()
        try:
            return self.geocode_live(address)
        except GeodataTransportError as e:
            self.unreachable = True
            logger.warning(f"Geodata provider unreachable while geocoding '{address}', synthesizing locations: {e}")
            return self._synthesize()
        except GeodataError as e:
            logger.warning(f"Geocoding failed for '{address}', using synthesized location: {e}")
            return self._synthesize()

    def geocode_many(self, addresses: Sequence[str]) -> list[Location]:
        self.unreachable = False
        locations = [self.geocode(address) for address in addresses]
        if self.unreachable:
            skipped = sum(1 for location in locations if location.synthesized)
            logger.info(f"Synthesized {skipped}/{len(addresses)} locations after provider became unreachable")
        return locations

    def _block_sizes(self, size: int) -> tuple[int, int]:
        """Return ``(origins, destinations)`` per request within the element limits."""
        destinations = max(1, min(size, self.max_dimension, self.max_elements))
        origins = max(1, min(size, self.max_dimension, self.max_elements // destinations))
        return origins, destinations

    def _matrix_block(
        self,
        addresses: Sequence[str],
        origin_range: range,
        destination_range: range,
    ) -> list[list[DistanceEdge]]:
        data = self._get_json(
            self.distance_matrix_url,
            {
                "origins": "|".join(addresses[i] for i in origin_range),
                "destinations": "|".join(addresses[j] for j in destination_range),
                "units": "metric",
            },
        )
        if data.get("status") != "OK":
            raise GeodataError(f"Distance Matrix API error: {data.get('status')!r}")

        rows = data.get("rows")
        if not isinstance(rows, list) or len(rows) != len(origin_range):
            raise GeodataError(
                f"Distance matrix block [{origin_range.start}:{origin_range.stop}] has "
                f"{len(rows) if isinstance(rows, list) else 'no'} rows, expected {len(origin_range)}."
            )

        block: list[list[DistanceEdge]] = []
        for i, row in zip(origin_range, rows):
            elements = row.get("elements") if isinstance(row, dict) else None
            if not isinstance(elements, list) or len(elements) != len(destination_range):
                raise GeodataError(f"Distance matrix row {i} is malformed.")
            parsed_row: list[DistanceEdge] = []
            for j, element in zip(destination_range, elements):
                if i == j:
                    parsed_row.append(ZERO_EDGE)
                    continue
                parsed_row.append(_parse_element(element, i, j))
            block.append(parsed_row)
        return block

    def distance_matrix(self, addresses: Sequence[str]) -> DistanceMatrix:
        """Fetch the full origins x destinations matrix for ``addresses``.

        Requests are split into origin/destination blocks that fit the
        provider's per-request element limit and merged back by index. Any
        non-OK status, missing row or element, or non-numeric value in any
        block raises ``GeodataError``; partial matrices are never returned.
        An unreachable provider fails immediately without a request.
        """
        if not addresses:
            raise ValueError("At least one address is required for a distance matrix.")
        if self.unreachable:
            raise GeodataTransportError("Provider unreachable during geocoding; distance matrix not requested.")

        size = len(addresses)
        origin_block, destination_block = self._block_sizes(size)
        origin_ranges = [range(i, min(i + origin_block, size)) for i in range(0, size, origin_block)]
        destination_ranges = [range(j, min(j + destination_block, size)) for j in range(0, size, destination_block)]
        if len(origin_ranges) * len(destination_ranges) > 1:
            logger.info(
                f"Chunking distance matrix for {size} addresses into "
                f"{len(origin_ranges) * len(destination_ranges)} requests"
            )

        edges: list[list[DistanceEdge]] = [[] for _ in range(size)]
        for origin_range in origin_ranges:
            for destination_range in destination_ranges:
                block = self._matrix_block(addresses, origin_range, destination_range)
                for i, parsed_row in zip(origin_range, block):
                    edges[i].extend(parsed_row)

        return DistanceMatrix(edges, source=SOURCE_GOOGLE)


def _parse_element(element: Any, origin: int, destination: int) -> DistanceEdge:
    try:
        if element.get("status", "OK") != "OK":
            raise GeodataError(
                f"No route between locations {origin} and {destination}: {element.get('status')!r}"
            )
        return DistanceEdge(
            distance_meters=float(element["distance"]["value"]),
            duration_seconds=float(element["duration"]["value"]),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise GeodataError(f"Distance matrix element [{origin}][{destination}] is malformed.") from e


def check_health(api_key: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check the geocoding endpoint with the service region's reference point."""
    try:
        client = GoogleMapsClient(api_key=api_key, max_retries=0, timeout=5.0, transport=transport)
        client.geocode_live(f"{settings.service_region_latitude},{settings.service_region_longitude}")
        return True
    except GeodataError:
        return False

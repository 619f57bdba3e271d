"""Unit tests for the geocoding service.

HTTP is faked with ``httpx.MockTransport``; every request is recorded so
tests can assert which providers were contacted.
"""

import httpx
import pytest

from app.config import Settings
from app.models import Location, NotFound
from app.services.geocoding import (
    ArcGISProvider,
    GeocodingService,
    NominatimProvider,
    PhotonProvider,
    parse_coordinates,
)

ARCGIS_HOST = "geocode.arcgis.com"
PHOTON_HOST = "photon.komoot.io"
NOMINATIM_HOST = "nominatim.openstreetmap.org"

ARCGIS_HIT = {"candidates": [{"address": "Siam Paragon", "location": {"x": 100.5347, "y": 13.7462}, "score": 100}]}
PHOTON_HIT = {"features": [{"geometry": {"coordinates": [100.5350, 13.7460]}, "properties": {"name": "Siam Paragon"}}]}
NOMINATIM_HIT = [{"lat": "13.7465", "lon": "100.5349", "display_name": "Siam Paragon, Bangkok"}]


class RecordingTransport:
    """Builds a MockTransport that answers per host and records requests."""

    def __init__(self, responses: dict) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.responses.get(request.url.host)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        if answer is None:
            return httpx.Response(404)
        return httpx.Response(200, json=answer)

    @property
    def hosts(self) -> list[str]:
        return [request.url.host for request in self.requests]


def _service(recorder: RecordingTransport) -> GeocodingService:
    return GeocodingService(settings=Settings(), transport=recorder())


class TestParseCoordinates:
    """Tests for direct coordinate extraction."""

    @pytest.mark.parametrize(
        "query, expected",
        [
            ("13.75,100.50", (13.75, 100.50)),
            ("13.75, 100.50", (13.75, 100.50)),
            ("13.75 100.50", (13.75, 100.50)),
            ("  -33.8688, 151.2093 ", (-33.8688, 151.2093)),
            ("+13.75,+100.5", (13.75, 100.5)),
            ("Lat: 13.75 Lng: 100.50", (13.75, 100.50)),
        ],
    )
    def test_valid_pairs(self, query: str, expected: tuple[float, float]) -> None:
        location = parse_coordinates(query)
        assert location is not None
        assert (location.lat, location.lng) == expected

    @pytest.mark.parametrize(
        "query",
        ["Siam Paragon", "999,999", "95.5, 100.5", "13.75, 200.5", "999.5,100.5", "Soi 12 45"],
    )
    def test_rejected(self, query: str) -> None:
        assert parse_coordinates(query) is None


class TestGeocodingServiceInit:
    def test_default_provider_order(self) -> None:
        service = GeocodingService(settings=Settings())
        assert [type(p) for p in service.providers] == [ArcGISProvider, PhotonProvider, NominatimProvider]


class TestGeocodingServiceResolve:
    """Tests for the provider fallback chain."""

    @pytest.mark.asyncio
    async def test_coordinates_resolve_without_network(self) -> None:
        recorder = RecordingTransport({})
        location = await _service(recorder).resolve("13.75,100.50")
        assert location == Location(lat=13.75, lng=100.50)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_name_goes_to_first_provider(self) -> None:
        recorder = RecordingTransport({ARCGIS_HOST: ARCGIS_HIT, PHOTON_HOST: PHOTON_HIT})
        location = await _service(recorder).resolve("Siam Paragon")
        assert location == Location(lat=13.7462, lng=100.5347)
        assert recorder.hosts == [ARCGIS_HOST]
        assert recorder.requests[0].url.params["singleLine"] == "Siam Paragon"

    @pytest.mark.asyncio
    async def test_out_of_range_numbers_fall_through(self) -> None:
        recorder = RecordingTransport({ARCGIS_HOST: ARCGIS_HIT})
        location = await _service(recorder).resolve("999,999")
        assert location == Location(lat=13.7462, lng=100.5347)
        assert recorder.hosts == [ARCGIS_HOST]

    @pytest.mark.asyncio
    async def test_first_provider_wins_over_later_ones(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: ARCGIS_HIT,
            PHOTON_HOST: PHOTON_HIT,
            NOMINATIM_HOST: NOMINATIM_HIT,
        })
        location = await _service(recorder).resolve("Siam Paragon")
        assert (location.lat, location.lng) == (13.7462, 100.5347)

    @pytest.mark.asyncio
    async def test_empty_result_falls_back_to_photon(self) -> None:
        recorder = RecordingTransport({ARCGIS_HOST: {"candidates": []}, PHOTON_HOST: PHOTON_HIT})
        location = await _service(recorder).resolve("Siam Paragon")
        # Photon returns [lng, lat]
        assert location == Location(lat=13.7460, lng=100.5350)
        assert recorder.hosts == [ARCGIS_HOST, PHOTON_HOST]

    @pytest.mark.asyncio
    async def test_network_error_falls_back(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: httpx.ConnectError("boom"),
            PHOTON_HOST: httpx.Response(500),
            NOMINATIM_HOST: NOMINATIM_HIT,
        })
        location = await _service(recorder).resolve("Siam Paragon")
        assert location == Location(lat=13.7465, lng=100.5349)
        assert recorder.hosts == [ARCGIS_HOST, PHOTON_HOST, NOMINATIM_HOST]

    @pytest.mark.asyncio
    async def test_malformed_response_falls_back(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: httpx.Response(200, text="<html>oops</html>"),
            PHOTON_HOST: {"features": [{"geometry": {}}]},
            NOMINATIM_HOST: NOMINATIM_HIT,
        })
        location = await _service(recorder).resolve("Siam Paragon")
        assert location == Location(lat=13.7465, lng=100.5349)

    @pytest.mark.asyncio
    async def test_out_of_range_provider_result_is_skipped(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: {"candidates": [{"location": {"x": 100.5, "y": 123.0}}]},
            PHOTON_HOST: PHOTON_HIT,
        })
        location = await _service(recorder).resolve("Siam Paragon")
        assert location == Location(lat=13.7460, lng=100.5350)

    @pytest.mark.asyncio
    async def test_all_providers_empty_raises_not_found(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: {"candidates": []},
            PHOTON_HOST: {"features": []},
            NOMINATIM_HOST: [],
        })
        with pytest.raises(NotFound):
            await _service(recorder).resolve("Nowhere at all")
        assert recorder.hosts == [ARCGIS_HOST, PHOTON_HOST, NOMINATIM_HOST]

    @pytest.mark.asyncio
    async def test_blank_query_raises_without_network(self) -> None:
        recorder = RecordingTransport({})
        with pytest.raises(NotFound):
            await _service(recorder).resolve("   ")
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_each_provider_called_once(self) -> None:
        recorder = RecordingTransport({
            ARCGIS_HOST: httpx.Response(503),
            PHOTON_HOST: httpx.Response(503),
            NOMINATIM_HOST: httpx.Response(503),
        })
        with pytest.raises(NotFound):
            await _service(recorder).resolve("Siam Paragon")
        assert len(recorder.requests) == 3

"""Unit tests for data models, error types and configuration."""

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.models import (
    CATEGORY_KEYS,
    AnalysisFailed,
    AnalysisResult,
    ErrorCode,
    Location,
    NotFound,
    PlaceItem,
    RouteStep,
    TravelMode,
)


def _place(name: str, **kwargs) -> PlaceItem:
    return PlaceItem(name=name, distance="100 m", source="osm", **kwargs)


class TestLocation:
    """Tests for Location validation."""

    def test_boundary_values(self) -> None:
        assert Location(lat=90.0, lng=180.0).lat == 90.0
        assert Location(lat=-90.0, lng=-180.0).lng == -180.0

    @pytest.mark.parametrize("lat, lng", [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0), (0.0, -181.0)])
    def test_out_of_range_rejected(self, lat: float, lng: float) -> None:
        with pytest.raises(ValidationError):
            Location(lat=lat, lng=lng)

    def test_immutable(self) -> None:
        location = Location(lat=13.75, lng=100.5)
        with pytest.raises(ValidationError):
            location.lat = 14.0


class TestPlaceItem:
    def test_popularity_range(self) -> None:
        with pytest.raises(ValidationError):
            _place("Too popular", popularity=1.2)

    def test_rating_range(self) -> None:
        with pytest.raises(ValidationError):
            _place("Bad rating", rating=0.5)

    def test_reviews_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            _place("Negative", reviews=-1)


class TestAnalysisResult:
    """Tests for category access and heatmap intensity."""

    def test_all_categories_present(self) -> None:
        result = AnalysisResult(locationName="Area", summary="Summary")
        assert list(result.categories()) == list(CATEGORY_KEYS)
        assert all(items == [] for items in result.categories().values())
        assert result.total_places() == 0

    def test_heat_points_use_default_popularity(self) -> None:
        result = AnalysisResult(
            locationName="Area",
            summary="Summary",
            food=[_place("Cafe", lat=13.7, lng=100.5)],
        )
        assert result.heat_points() == [(13.7, 100.5, 0.5)]

    def test_heat_points_boost_is_clamped(self) -> None:
        result = AnalysisResult(
            locationName="Area",
            summary="Summary",
            shopping=[_place("Mall", lat=13.7, lng=100.5, popularity=0.95, rating=4.8)],
            transport=[_place("Station", lat=13.8, lng=100.6, popularity=0.5, rating=4.6)],
        )
        intensities = [point[2] for point in result.heat_points()]
        assert intensities == [1.0, pytest.approx(0.7)]

    def test_heat_points_skip_items_without_coordinates(self) -> None:
        result = AnalysisResult(
            locationName="Area",
            summary="Summary",
            recreation=[_place("Park")],
        )
        assert result.heat_points() == []


class TestRouteStep:
    def test_default_mode_is_car(self) -> None:
        assert RouteStep(instruction="Turn left").mode is TravelMode.CAR

    def test_mode_from_string(self) -> None:
        assert RouteStep(instruction="Walk", mode="walk").mode is TravelMode.WALK


class TestErrors:
    def test_default_user_message(self) -> None:
        error = NotFound()
        assert error.code is ErrorCode.NOT_FOUND
        assert str(error) == error.user_message

    def test_cause_not_exposed(self) -> None:
        try:
            try:
                raise ConnectionError("socket closed at 10.0.0.1")
            except ConnectionError as e:
                raise AnalysisFailed() from e
        except AnalysisFailed as error:
            payload = error.to_app_error()
            assert "10.0.0.1" not in payload.message
            assert "10.0.0.1" not in payload.user_message
            assert payload.code is ErrorCode.ANALYSIS_FAILED


class TestSettings:
    """Tests for configuration loading."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.fare_base == 35.0
        assert settings.fare_per_km == 6.0
        assert settings.default_popularity == 0.5
        assert settings.max_category_items == 10
        assert settings.locale == "th"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FARE_BASE", "40")
        monkeypatch.setenv("APP_LOCALE", "en")
        monkeypatch.setenv("ANALYSIS_BACKEND", "ai")
        settings = Settings.from_env()
        assert settings.fare_base == 40.0
        assert settings.locale == "en"
        assert settings.analysis_backend == "ai"

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FARE_PER_KM", "8")
        settings = Settings.from_env({"fare_per_km": 7.5})
        assert settings.fare_per_km == 7.5

    def test_invalid_value_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_POPULARITY", "2")
        with pytest.raises(ValidationError):
            Settings.from_env()

"""Weather and geocoding lookups with their fallbacks."""

import requests

from pocketcloset.utils import weather


def _response(mocker, payload: dict):
    response = mocker.Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_current_weather_parses_open_meteo(mocker) -> None:
    get = mocker.patch.object(
        weather.requests, "get",
        return_value=_response(mocker, {"current": {"temperature_2m": 17.6, "weather_code": 61}}),
    )

    result = weather.current_weather(48.85, 2.35)

    assert result == {"temperature": 18, "condition": "Rain", "code": 61}
    assert get.call_args.kwargs["params"]["current"] == "temperature_2m,weather_code"


def test_current_weather_unknown_code(mocker) -> None:
    mocker.patch.object(
        weather.requests, "get",
        return_value=_response(mocker, {"current": {"temperature_2m": 3, "weather_code": 71}}),
    )

    assert weather.current_weather(0, 0)["condition"] == "Unknown"


def test_current_weather_falls_back_when_offline() -> None:
    assert weather.current_weather(0, 0) == {"temperature": 20, "condition": "Unknown", "code": 0}


def test_weather_for_city_geocodes_first(mocker) -> None:
    responses = [
        _response(mocker, {"results": [{"latitude": 41.39, "longitude": 2.17}]}),
        _response(mocker, {"current": {"temperature_2m": 25.2, "weather_code": 0}}),
    ]
    get = mocker.patch.object(weather.requests, "get", side_effect=responses)

    result = weather.weather_for_city("Barcelona")

    assert result["temperature"] == 25
    assert get.call_args_list[1].kwargs["params"]["latitude"] == 41.39


def test_weather_for_unknown_city(mocker) -> None:
    mocker.patch.object(weather.requests, "get", return_value=_response(mocker, {}))

    assert weather.weather_for_city("Atlantis") == weather.fallback_weather()


def test_reverse_geocode_prefers_city_then_town(mocker) -> None:
    mocker.patch.object(
        weather.requests, "get", return_value=_response(mocker, {"address": {"town": "Altea", "county": "Marina"}})
    )

    assert weather.reverse_geocode(38.6, -0.05) == "Altea"


def test_reverse_geocode_failure(mocker) -> None:
    mocker.patch.object(weather.requests, "get", side_effect=requests.Timeout("slow"))

    assert weather.reverse_geocode(38.6, -0.05) == "Unknown location"

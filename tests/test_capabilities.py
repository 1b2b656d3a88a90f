import json
import logging

import pytest

from app.core.call_result import CallResult, CallState
from app.core.config import settings
from app.models.news import ScrapedHeadline
from app.services import capabilities
from app.services.capabilities import CapabilityService, SoilAnalysisError
from app.services.fallbacks import CHAT_FALLBACK_TEXT, nearby_places_fallback
from app.services.model_invoker import GenAIInvoker, ModelCallError, RelayInvoker

from conftest import FakeInvoker


def _parameter(name, unit="", status="Normal"):
    return {
        "name": name,
        "value": 7.1,
        "unit": unit,
        "status": status,
        "effect": "Good for most crops",
        "recommendation": "Maintain",
    }


SOIL_REPORT = {
    "extracted_location": "Pune",
    "narrative": {
        "soil_condition_summary": "Healthy soil with low nitrogen.",
        "weather_location_analysis": "Post-monsoon conditions.",
        "soil_maintenance": ["Add compost"],
        "production_increase_tips": ["Use drip irrigation"],
        "fertilizer_recommendations": {"chemical": ["IFFCO Urea"], "organic": ["Vermicompost"]},
        "irrigation_requirements": "Weekly",
        "crop_suggestions": [{"crop": "Wheat", "reasoning": "Rabi season"}],
        "disease_prediction": [
            {
                "disease_name": "Rust",
                "likelihood_reason": "Humidity",
                "preventative_measures": ["Resistant varieties"],
            }
        ],
    },
    "raw_data": {
        "ph": _parameter("pH"),
        "ec": _parameter("EC", "dS/m"),
        "oc": _parameter("Organic Carbon", "%", "Low"),
        "nitrogen": _parameter("Nitrogen", "kg/ha", "Deficient"),
        "phosphorus": _parameter("Phosphorus", "kg/ha"),
        "potassium": _parameter("Potassium", "kg/ha", "High"),
        "secondary": [_parameter("Sulphur", "ppm")],
        "micronutrients": [],
    },
}


@pytest.fixture
def no_scraping(monkeypatch):
    async def no_items():
        return []

    monkeypatch.setattr(capabilities, "fetch_pib_press_releases", no_items)
    monkeypatch.setattr(capabilities, "fetch_times_of_india", no_items)


async def test_soil_analysis_from_fenced_reply():
    reply = "Here is the result:\n```json\n" + json.dumps(SOIL_REPORT) + "\n```"
    invoker = FakeInvoker([reply])
    service = CapabilityService(invoker)

    analysis = await service.analyze_soil_report("QUJD", "image/jpeg", "mr")

    assert analysis.extracted_location == "Pune"
    assert analysis.raw_data.ph.value == "7.1"
    assert analysis.narrative.crop_suggestions[0].crop == "Wheat"
    call = invoker.calls[0]
    assert call["attachments"][0].mime_type == "image/jpeg"
    assert "Translate all narrative content to Marathi" in call["prompt"]


async def test_soil_analysis_tolerates_missing_lists():
    report = json.loads(json.dumps(SOIL_REPORT))
    del report["narrative"]["crop_suggestions"]
    del report["raw_data"]["secondary"]
    service = CapabilityService(FakeInvoker([json.dumps(report)]))

    analysis = await service.analyze_soil_report("QUJD", "image/jpeg", "en")

    assert analysis.narrative.crop_suggestions == []
    assert analysis.raw_data.secondary == []


async def test_timeout_serves_schemes_fallback_but_fails_soil_analysis():
    service = CapabilityService(
        FakeInvoker([ModelCallError("timeout"), ModelCallError("timeout")])
    )

    schemes = await service.get_government_schemes("Pune", "en")
    assert schemes.schemes[0].name == "PM-Kisan Samman Nidhi"

    with pytest.raises(SoilAnalysisError, match="Failed to analyze report"):
        await service.analyze_soil_report("QUJD", "application/pdf", "en")


async def test_partial_soil_report_is_rejected():
    report = json.loads(json.dumps(SOIL_REPORT))
    del report["raw_data"]["ph"]
    service = CapabilityService(FakeInvoker([json.dumps(report)]))

    with pytest.raises(SoilAnalysisError):
        await service.analyze_soil_report("QUJD", "image/png", "en")


async def test_schemes_normalized_from_model():
    reply = json.dumps(
        {
            "schemes": [
                {
                    "name": "Rashtriya Krishi Vikas Yojana",
                    "description": "State support.",
                    "benefits": ["a", "b"],
                    "stepsToClaim": ["apply"],
                    "officialLink": "https://rkvy.nic.in",
                }
            ]
        }
    )
    service = CapabilityService(FakeInvoker([reply]))

    result = await service.fetch_schemes(None, "en")

    assert result.state == CallState.NORMALIZED
    assert result.value.schemes[0].name == "Rashtriya Krishi Vikas Yojana"


async def test_nearby_places_fallback_for_same_location_is_identical():
    service = CapabilityService(FakeInvoker([ModelCallError(), ModelCallError(), ModelCallError()]))

    first = await service.find_nearby_places("Pune", "en")
    second = await service.find_nearby_places("Pune", "en")
    nashik = await service.find_nearby_places("Nashik", "en")

    assert len(first) == 6
    assert first == second
    assert [(p.name, p.distance) for p in first] != [(p.name, p.distance) for p in nashik]


async def test_empty_nearby_list_counts_as_failure():
    service = CapabilityService(FakeInvoker(["[]"]))

    result = await service.fetch_nearby_places("Pune", "en")
    assert result.state == CallState.NORMALIZE_FAILED

    service = CapabilityService(FakeInvoker(["[]"]))
    places = await service.find_nearby_places("Pune", "en")
    assert places == nearby_places_fallback("Pune")


async def test_nearby_places_with_coordinates_uses_generic_area():
    invoker = FakeInvoker([ModelCallError()])
    service = CapabilityService(invoker)

    places = await service.find_nearby_places((18.52, 73.85), "en")

    assert "near: 18.52, 73.85" in invoker.calls[0]["prompt"]
    assert places == nearby_places_fallback("Your Area")


async def test_news_sources_are_deduplicated_and_capped(monkeypatch):
    pib = [
        ScrapedHeadline(title=f"Release {i}", link=f"https://pib.gov.in/PressReleasePage.aspx?PRID={i}")
        for i in range(12)
    ]
    times = [
        ScrapedHeadline(title="Onion prices", link="https://timesofindia.indiatimes.com/articleshow/1.cms"),
        ScrapedHeadline(title="Onion prices again", link="https://timesofindia.indiatimes.com/articleshow/1.cms"),
    ]

    async def fake_pib():
        return pib

    async def fake_times():
        return times

    monkeypatch.setattr(capabilities, "fetch_pib_press_releases", fake_pib)
    monkeypatch.setattr(capabilities, "fetch_times_of_india", fake_times)

    reply = json.dumps(
        {
            "news": [
                {
                    "category": "Market",
                    "title": "Onion prices rise",
                    "summary": "Prices went up.",
                    "source": "Times of India",
                    "link": "https://timesofindia.indiatimes.com/articleshow/1.cms",
                },
                {
                    "category": "Weather",
                    "title": "Rain alert",
                    "summary": "Heavy rain expected.",
                    "source": "PIB",
                    "link": "https://pib.gov.in/PressReleasePage.aspx?PRID=0",
                },
            ]
        }
    )
    invoker = FakeInvoker([reply])
    service = CapabilityService(invoker)

    response = await service.get_agricultural_news("Nashik", "en")

    uris = [s.uri for s in response.sources]
    assert len(uris) == len(set(uris)) == 10
    assert response.sources[0].title == "Times of India"
    assert response.sources[1].title == "PIB"
    assert "Release 0" in invoker.calls[0]["prompt"]


async def test_news_failure_serves_fallback(no_scraping):
    service = CapabilityService(FakeInvoker(["I cannot help with that."]))

    response = await service.get_agricultural_news("Nashik", "en")

    assert response.news[0].title == "Weather Update Service Unavailable"
    assert response.sources == []


async def test_chat_fallback_text_on_failure():
    service = CapabilityService(FakeInvoker([ModelCallError()]))
    session = service.create_chat_session("en")

    reply = await service.send_chat_message(session, "hello")

    assert reply == CHAT_FALLBACK_TEXT
    assert session.history == ()


def test_call_result_or_else_marks_fallback_served():
    result = CallResult.failed(ModelCallError(), capability="schemes")
    assert result.or_else(lambda: "fallback") == "fallback"
    assert result.state == CallState.FALLBACK_SERVED

    ok = CallResult.normalized("value")
    assert ok.or_else(lambda: "fallback") == "value"
    assert ok.unwrap() == "value"

    with pytest.raises(ModelCallError):
        CallResult.failed(ModelCallError()).unwrap()


async def test_missing_api_key_serves_schemes_fallback(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    service = CapabilityService(GenAIInvoker())

    schemes = await service.get_government_schemes("Pune", "en")

    assert schemes.schemes[0].name == "PM-Kisan Samman Nidhi"


async def test_deeply_nested_reply_serves_schemes_fallback():
    reply = '{"a":' + "[" * 200000 + "}"
    service = CapabilityService(FakeInvoker([reply]))

    result = await service.fetch_schemes("Pune", "en")

    assert result.state == CallState.NORMALIZE_FAILED
    assert result.or_else(lambda: "fallback") == "fallback"


async def test_call_walks_through_every_state(caplog):
    service = CapabilityService(FakeInvoker(['{"schemes": []}']))

    with caplog.at_level(logging.DEBUG, logger="app.core.call_result"):
        result = await service.fetch_schemes(None, "en")

    assert result.state == CallState.NORMALIZED
    transitions = [
        r.getMessage() for r in caplog.records if r.name == "app.core.call_result"
    ]
    assert transitions == [
        "schemes: idle -> invoking",
        "schemes: invoking -> success",
        "schemes: success -> normalizing",
        "schemes: normalizing -> normalized",
    ]


def test_call_result_rejects_invalid_transition():
    result = CallResult(capability="news")
    with pytest.raises(RuntimeError):
        result.advance(CallState.NORMALIZED)


def test_capability_service_uses_relay_when_configured(monkeypatch):
    monkeypatch.setattr(settings, "BACKEND_BASE_URL", "http://relay.test")
    assert isinstance(capabilities.get_capability_service().invoker, RelayInvoker)
    monkeypatch.setattr(settings, "BACKEND_BASE_URL", "")
    assert isinstance(capabilities.get_capability_service().invoker, GenAIInvoker)

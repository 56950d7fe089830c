"""
Pytest configuration and fixtures
"""
import base64
import json

import pytest
import requests
from bson import ObjectId
from pymongo.errors import PyMongoError

from app.core.database import mongodb
from app.services import gemini_service


# ---------- Gemini double ----------

class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("body is not JSON")
        return self._payload


def candidate(part):
    return {"candidates": [{"content": {"role": "model", "parts": [part]}}]}


class FakeGemini:
    """Stands in for requests.post; replies are consumed in order."""

    def __init__(self):
        self.calls = []
        self.replies = []

    def reply_json(self, obj, fenced=False):
        text = json.dumps(obj)
        if fenced:
            text = f"```json\n{text}\n```"
        self.replies.append(FakeResponse(candidate({"text": text})))

    def reply_text(self, text):
        self.replies.append(FakeResponse(candidate({"text": text})))

    def reply_audio(self, pcm: bytes):
        encoded = base64.b64encode(pcm).decode("ascii")
        self.replies.append(FakeResponse(candidate({"inlineData": {"mimeType": "audio/L16;codec=pcm;rate=24000", "data": encoded}})))

    def reply_raw(self, response):
        self.replies.append(response)

    def fail(self, error: Exception):
        self.replies.append(error)

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def gemini(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(gemini_service, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(gemini_service.requests, "post", fake)
    return fake


# ---------- MongoDB double ----------

class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, documents, error=None):
        self._documents = iter(documents)
        self._error = error

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._error:
            raise self._error
        try:
            return next(self._documents)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    def __init__(self):
        self.documents = []
        self.fail_writes = False
        self.fail_reads = False

    async def insert_one(self, document):
        if self.fail_writes:
            raise PyMongoError("write refused")
        stored = dict(document)
        stored["_id"] = ObjectId()
        self.documents.append(stored)
        return FakeInsertResult(stored["_id"])

    def find(self, query=None):
        return FakeCursor(list(self.documents), PyMongoError("read refused") if self.fail_reads else None)

    async def find_one(self, query):
        if self.fail_reads:
            raise PyMongoError("read refused")
        for document in self.documents:
            if all(document.get(key) == value for key, value in query.items()):
                return document
        return None


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def fake_db(monkeypatch):
    database = FakeDatabase()
    monkeypatch.setattr(mongodb, "get_database", lambda: database)
    return database


# ---------- Sample data ----------

@pytest.fixture
def tomato_crop():
    return {
        "id": "crop-1",
        "cropName": "Tomato",
        "fieldSize": "2 acres",
        "location": "Pune",
        "sowingDate": "2024-01-10",
    }


@pytest.fixture
def post_harvest_reply():
    return {
        "storageRecommendations": "Store at 12-15C with 85-90% humidity in ventilated crates.",
        "transportationOptions": "Use ventilated plastic crates in a covered truck early in the morning.",
        "marketLinkages": "Sell through Pune APMC or contract with local FPOs.",
        "valueAdditionOpportunities": "Grade by size and make puree or sauce from culls.",
        "pricingStrategy": "Stagger sales over two weeks and compare e-NAM prices daily.",
        "qualityControlMeasures": "Sort out cracked fruit and check for blossom end rot.",
        "postHarvestHandling": "Harvest at breaker stage, pre-cool and avoid stacking too high.",
        "wasteManagement": "Compost rejected fruit and vines away from the field.",
    }


@pytest.fixture
def market_reply():
    return {
        "marketSummary": "Tomato prices in Pune are rising on lower arrivals.",
        "corePriceInfo": {
            "currentPrice": {"price": 2450.5, "unit": "INR/quintal", "market": "Pune APMC"},
            "dailyPriceRange": {"low": 2200, "high": 2600, "unit": "INR/quintal"},
        },
        "historicalTrendAnalysis": {
            "priceTrend": {"direction": "Upward", "period": "last 30 days"},
            "priceChange": {"change": 310.25, "percentageChange": 14.5},
        },
        "marketDynamics": {
            "supplyStatus": {"status": "Low", "impact": "Arrivals are down after heavy rain."},
            "demandStatus": {"status": "High", "impact": "Wedding season demand is strong."},
        },
        "actionableInsight": {
            "recommendation": "Hold for one week",
            "reasoning": "Prices are expected to rise further while arrivals stay low.",
        },
        "additionalInfo": {"dataSource": "Agmarknet", "lastUpdated": "2024-04-01"},
    }


@pytest.fixture
def crop_agent_reply():
    return {
        "summary": "Your tomatoes need a potassium top-up this week.",
        "structuredAdvice": [
            {"title": "Fertiliser", "content": "Apply 25 kg MOP per acre.", "icon": "FlaskConical"},
            {"title": "Irrigation", "content": "Water every 3 days.", "icon": "Droplet"},
        ],
    }

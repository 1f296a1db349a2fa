import pytest
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

from website_updater.config import Settings


def customer_xml(
    id: str = "1042",
    code: str = "WE01",
    name: str = "W E Bowers, Inc.",
    city: str = "Glen Burnie",
    state: str = "MD",
    phone: str = "410-555-0100",
    website: str = "",
) -> str:
    """A getCustomer response shaped like the directory service's."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
  <soap:Body>
    <getCustomerResponse xmlns="http://digitalgateway.com/WebServices/PublicAPIService">
      <getCustomerResult>
        <CustomerNumber>
          <ID><Value>{id}</Value><Valid>true</Valid></ID>
          <Code><Value>{code}</Value><Valid>true</Valid></Code>
        </CustomerNumber>
        <CustomerName><Value>{name}</Value><Valid>true</Valid></CustomerName>
        <Address>
          <City><Value>{city}</Value><Valid>true</Valid></City>
          <State><Value>{state}</Value><Valid>true</Valid></State>
        </Address>
        <Phone1><Value>{phone}</Value><Valid>true</Valid></Phone1>
        <WebSite><Value>{website}</Value><Valid>true</Valid></WebSite>
      </getCustomerResult>
    </getCustomerResponse>
  </soap:Body>
</soap:Envelope>"""


SAVE_OK_XML = """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
  <soap:Body>
    <saveCustomerResponse xmlns="http://digitalgateway.com/WebServices/PublicAPIService">
      <saveCustomerResult><Value>true</Value></saveCustomerResult>
    </saveCustomerResponse>
  </soap:Body>
</soap:Envelope>"""


def mock_response_cm(status: int, text: str = "") -> MagicMock:
    """Async context manager yielding a response with the given status and body."""
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=resp)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


def mock_session(responses: List[MagicMock]) -> MagicMock:
    """An open aiohttp-like session whose post() returns the given responses in order."""
    session = MagicMock()
    session.closed = False
    session.post = MagicMock(side_effect=responses)
    return session


class ScriptedPrompter:
    """Prompter double answering from a script and recording every question."""

    def __init__(self, answers: Optional[List[str]] = None):
        self.answers = list(answers or [])
        self.questions: List[str] = []

    async def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else ""

    async def confirm(self, question: str) -> bool:
        return (await self.ask(question)).lower() in {"y", "yes"}

    async def choose(self, question: str, choices) -> str:
        answer = (await self.ask(question)).lower()
        return answer if answer in choices else choices[-1]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        username="apiuser",
        password="s3cret",
        company_id="77",
        google_cse_key=None,
        google_cx=None,
        openai_api_key=None,
        dns_timeout=0.5,
        http_timeout=0.5,
    )

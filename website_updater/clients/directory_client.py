"""
SOAP client for the legacy customer directory service.
"""
import asyncio
import xml.etree.ElementTree as ET
from typing import Optional
from xml.sax.saxutils import escape
from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger

from website_updater.config import Settings
from website_updater.exceptions import DirectoryServiceError
from website_updater.models import CustomerRecord

ENVELOPE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"
               xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
               xmlns:xsd="http://www.w3.org/2001/XMLSchema">
  <soap:Body>
    <{method} xmlns="{namespace}">
      <Auth>
        <User>{user}</User>
        <Password>{password}</Password>
        <CompanyID>{company_id}</CompanyID>
        <Version>{version}</Version>
      </Auth>
      {body}
    </{method}>
  </soap:Body>
</soap:Envelope>"""

LOOKUP_BODY = """
    <CustomerNumber>
      <ID><Value>0</Value><Valid>false</Valid></ID>
      <Code><Value>{code}</Value><Valid>true</Valid></Code>
    </CustomerNumber>"""

SAVE_BODY = """
    <customer>
      <CustomerNumber>
        <ID><Value>{id}</Value><Valid>true</Valid></ID>
        <Code><Value>{code}</Value><Valid>true</Valid></Code>
      </CustomerNumber>
      <WebSite>
        <Value>{website}</Value>
        <Valid>true</Valid>
      </WebSite>
    </customer>"""

SAVE_SUCCESS_MARKER = "savecustomerresult"


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


def _find_first(root: Optional[ET.Element], tag_name: str) -> Optional[ET.Element]:
    """Find the first element with the given local tag name, ignoring namespaces and case."""
    if root is None:
        return None
    wanted = tag_name.lower()
    for el in root.iter():
        if _local_name(el.tag) == wanted:
            return el
    return None


def _value_of(element: Optional[ET.Element]) -> str:
    if element is None:
        return ""
    for child in element:
        if _local_name(child.tag) == "value":
            return (child.text or "").strip()
    return ""


def parse_field(root: Optional[ET.Element], tag_name: str) -> str:
    """Text of <tag><Value>...</Value></tag>, or "" when absent."""
    return _value_of(_find_first(root, tag_name))


def parse_nested_field(root: Optional[ET.Element], tag_name: str, wrapper: str) -> str:
    """Text of <tag>...<wrapper><Value>...</Value></wrapper>...</tag>, or "" when absent."""
    return _value_of(_find_first(_find_first(root, tag_name), wrapper))


def decode_customer(xml_text: str, lookup_code: str = "") -> CustomerRecord:
    """
    Decode a getCustomer response. Never raises: a field that cannot be found,
    or a body that is not XML at all, yields empty strings.
    """
    try:
        root = ET.fromstring(xml_text.encode("utf-8") if isinstance(xml_text, str) else xml_text)
    except ET.ParseError as e:
        logger.debug(f"⚠️ Could not parse directory response for {lookup_code}: {e}")
        root = None

    return CustomerRecord(
        id=parse_nested_field(root, "CustomerNumber", "ID"),
        code=parse_nested_field(root, "CustomerNumber", "Code"),
        name=parse_field(root, "CustomerName"),
        city=parse_field(root, "City"),
        state=parse_field(root, "State"),
        phone=parse_field(root, "Phone1"),
        current_website=parse_field(root, "WebSite"),
    )


class DirectoryClient:
    """
    Client for the directory service's getCustomer/saveCustomer methods.
    Settings are read-only for the lifetime of the client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._session: Optional[ClientSession] = None

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=self.settings.directory_timeout))
        return self._session

    def build_envelope(self, method: str, body: str) -> str:
        s = self.settings
        return ENVELOPE_TEMPLATE.format(
            method=method,
            namespace=s.namespace,
            user=escape(s.username),
            password=escape(s.password),
            company_id=escape(s.company_id),
            version=escape(s.version),
            body=body,
        )

    def _masked(self, envelope: str) -> str:
        if not self.settings.password:
            return envelope
        return envelope.replace(escape(self.settings.password), "***")

    async def soap_request(self, method: str, body: str) -> str:
        """
        Post one envelope and return the raw response text.

        Raises:
            DirectoryServiceError: non-2xx status, transport failure or timeout.
        """
        envelope = self.build_envelope(method, body)
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": f"{self.settings.namespace}/{method}",
        }
        if self.settings.verbose:
            logger.debug(f"➡️ {method} request:\n{self._masked(envelope)}")

        session = await self._get_session()
        try:
            async with session.post(
                self.settings.endpoint,
                data=envelope.encode("utf-8"),
                headers=headers,
            ) as resp:
                text = await resp.text()
                if self.settings.verbose:
                    logger.debug(f"⬅️ {method} response ({resp.status}):\n{text}")
                if not 200 <= resp.status < 300:
                    raise DirectoryServiceError(f"HTTP {resp.status}: {text}")
                return text
        except asyncio.TimeoutError:
            raise DirectoryServiceError(
                f"{method} timed out after {self.settings.directory_timeout}s"
            ) from None
        except ClientError as e:
            raise DirectoryServiceError(f"{method} request failed: {e}") from e

    async def fetch_customer(self, customer_code: str) -> CustomerRecord:
        """Look up a customer by its business code."""
        body = LOOKUP_BODY.format(code=escape(customer_code))
        response = await self.soap_request("getCustomer", body)
        return decode_customer(response, customer_code)

    async def save_customer_website(
        self,
        customer_id: str,
        customer_code: str,
        website: str,
        lookup_code: str = "",
    ) -> bool:
        """
        Persist a website for a customer.

        Blank identifiers are sent as "0" and a blank code falls back to the
        code used for the original lookup, so required fields are never empty.

        Returns:
            bool: True when the response carries the save result marker.
        """
        out_id = customer_id.strip() if customer_id and customer_id.strip() else "0"
        out_code = customer_code.strip() if customer_code and customer_code.strip() else lookup_code
        body = SAVE_BODY.format(id=escape(out_id), code=escape(out_code), website=escape(website))
        response = await self.soap_request("saveCustomer", body)
        return bool(response) and SAVE_SUCCESS_MARKER in response.lower()

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

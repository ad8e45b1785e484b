"""
Enquiry sinks

A finalised booking leaves the system as a freeform enquiry. The sink only
answers ok or an error string; it never returns a booking identifier.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol
import logging

import httpx
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Unable to confirm payment."


class EnquiryPayload(BaseModel):
    """Enquiry as accepted by the HeimeShow enquiry endpoint"""

    model_config = ConfigDict(populate_by_name=True)

    enquiry_type: str = Field(..., alias="enquiryType")
    name: str
    email: str
    phone: str = ""
    preferred_date: str = Field("", alias="preferredDate")
    group_size: str = Field("", alias="groupSize")
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class EnquiryResult:
    ok: bool
    error: Optional[str] = None


class EnquirySink(Protocol):
    async def submit(self, payload: EnquiryPayload, token: Optional[str] = None) -> EnquiryResult:
        ...


class LoggingEnquirySink:
    """Records enquiries in the application log; used when no endpoint is configured"""

    async def submit(self, payload: EnquiryPayload, token: Optional[str] = None) -> EnquiryResult:
        logger.info(
            f"Enquiry received: {payload.enquiry_type} from {payload.email}\n{payload.message}"
        )
        return EnquiryResult(ok=True)


class HttpEnquirySink:
    """
    Posts enquiries as JSON to an HTTP endpoint.

    A non-2xx status or a body with ``ok: false`` is a failure; the body's
    ``error`` string is passed through when present.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def submit(self, payload: EnquiryPayload, token: Optional[str] = None) -> EnquiryResult:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload.to_wire(), headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Enquiry submission failed: {e}")
            return EnquiryResult(ok=False, error="We could not process your payment. Please try again.")

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.is_success or not body.get("ok"):
            error = body.get("error") or DEFAULT_ERROR
            logger.warning(f"Enquiry endpoint answered {response.status_code}: {error}")
            return EnquiryResult(ok=False, error=error)

        return EnquiryResult(ok=True)

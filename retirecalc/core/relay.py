"""Forward completed calculator leads to the Ortto CRM."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

import requests

from retirecalc.config import Settings
from retirecalc.errors import RelayConfigError, RelayUpstreamError
from retirecalc.schemas.lead import LeadData, LeadRequest, LeadResults, RelayResult
from retirecalc.schemas.plan import PlanInput, ProjectionResult

logger = logging.getLogger(__name__)

ACTIVITY_ID = "act:cm:retirement-calculator-submitted"
MERGE_KEY = "str::email"

# background dispatch limits for the HTML form
DEFAULT_DISPATCH_TIMEOUT = 10.0
DEFAULT_MAX_PENDING = 32

# (payload attribute, CRM field key)
STRING_FIELDS = [
    ("firstName", "str::first-name"),
    ("lastName", "str::last-name"),
    ("country", "str::country"),
    ("currency", "str::currency"),
]

NUMBER_FIELDS = [
    ("currentAge", "num::current-age"),
    ("retirementAge", "num::retirement-age"),
    ("currentSavings", "num::current-savings"),
    ("annualSalary", "num::annual-salary"),
    ("monthlyContribution", "num::monthly-contribution"),
    ("employerMatch", "num::employer-match"),
    ("annualReturn", "num::annual-return"),
    ("inflationRate", "num::inflation-rate"),
    ("annualExpenses", "num::annual-expenses"),
    ("yearsInRetirement", "num::years-in-retirement"),
]

RESULT_FIELDS = [
    ("totalAtRetirement", "num::total-at-retirement"),
    ("annualIncome", "num::annual-income"),
    ("yearsToRetirement", "num::years-to-retirement"),
]


def client_ip(forwarded_for: Optional[str]) -> Optional[str]:
    """First hop of an X-Forwarded-For header, or None."""
    if not forwarded_for:
        return None
    first = forwarded_for.split(",")[0].strip()
    return first or None


def _phone(lead: LeadRequest) -> Optional[str]:
    parts = [part.strip() for part in (lead.data.phoneCode, lead.data.phone) if part and part.strip()]
    return " ".join(parts) or None


def lead_from_calculation(plan: PlanInput, results: ProjectionResult) -> LeadRequest:
    """The payload the form hands to the relay after a successful calculation."""
    return LeadRequest(
        data=LeadData(**plan.model_dump()),
        results=LeadResults(
            totalAtRetirement=results.totalAtRetirement,
            annualIncome=results.annualIncome,
            yearsToRetirement=results.yearsToRetirement,
        ),
    )


def build_activity(lead: LeadRequest, source_ip: Optional[str]) -> Dict[str, Any]:
    """Map a lead onto the fixed Ortto activity document."""
    data = lead.data
    fields: Dict[str, Any] = {MERGE_KEY: data.email}

    for attr, key in STRING_FIELDS:
        fields[key] = getattr(data, attr)
    fields["str::phone"] = _phone(lead)
    for attr, key in NUMBER_FIELDS:
        fields[key] = getattr(data, attr)
    for attr, key in RESULT_FIELDS:
        fields[key] = getattr(lead.results, attr)

    return {
        "activities": [
            {
                "activity_id": ACTIVITY_ID,
                "attributes": {},
                "fields": fields,
                "location": {
                    "source_ip": source_ip,
                    "custom": None,
                    "address": None,
                },
            }
        ],
        "merge_by": [MERGE_KEY],
    }


class LeadRelay:
    """Thin HTTP client for the CRM activity endpoint. No retries."""

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "LeadRelay":
        if not settings.relay_configured:
            raise RelayConfigError(settings.missing_relay_settings())
        return cls(
            api_key=settings.ortto_api_key,
            endpoint=settings.ortto_endpoint,
            timeout=settings.relay_timeout,
            session=session,
        )

    def forward(
        self,
        lead: LeadRequest,
        source_ip: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> RelayResult:
        """POST one lead. ``timeout`` overrides the relay-wide setting when given."""
        body = build_activity(lead, source_ip)
        try:
            resp = self._session.post(
                self.endpoint,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "X-Api-Key": self.api_key,
                },
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as exc:
            raise RelayUpstreamError(str(exc)) from exc

        # only 2xx counts; requests treats 3xx as ok too
        result = RelayResult(ok=200 <= resp.status_code < 300, remoteStatus=resp.status_code, remoteBody=resp.text)
        if result.ok:
            logger.info("lead forwarded (status %s)", result.remoteStatus)
        else:
            logger.warning("CRM rejected lead: status %s", result.remoteStatus)
        return result


class LeadDispatcher:
    """
    Fire-and-forget submission used by the HTML form.

    Leads are forwarded on a background worker; whatever happens there is
    logged at debug level and never reaches the user. A lost lead is
    accepted, so there is no retry: when ``max_pending`` leads are already
    in flight or queued, new ones are dropped. Background calls always
    carry a finite timeout so a stalled CRM cannot pin the workers.
    """

    def __init__(
        self,
        relay: Optional[LeadRelay],
        max_workers: int = 2,
        max_pending: int = DEFAULT_MAX_PENDING,
        timeout: float = DEFAULT_DISPATCH_TIMEOUT,
    ):
        self.relay = relay
        self.timeout = timeout
        self._slots = threading.BoundedSemaphore(max_pending)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lead-relay")

    def submit(self, lead: LeadRequest, source_ip: Optional[str] = None) -> Optional[Future]:
        if self.relay is None:
            logger.debug("relay not configured, dropping lead")
            return None
        if not self._slots.acquire(blocking=False):
            logger.debug("lead backlog full, dropping lead")
            return None

        try:
            future = self._executor.submit(self.relay.forward, lead, source_ip, self.timeout)
        except RuntimeError:
            # executor already shut down
            self._slots.release()
            logger.debug("dispatcher stopped, dropping lead")
            return None
        future.add_done_callback(self._finish)
        return future

    def _finish(self, future: Future) -> None:
        self._slots.release()
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug("background lead submission failed: %s", exc)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

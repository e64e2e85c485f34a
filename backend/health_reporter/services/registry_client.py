import logging
import time
from typing import Optional
import httpx
from health_reporter.exceptions import RegistryError

logger = logging.getLogger(__name__)


class RegistryClient:
    """Client for the national registry submission API.

    Contract: ``POST {base_url}/submit {patientName, diagnosis} -> {nationalId}``.
    Any transport error, timeout, non-2xx status or reply without a
    ``nationalId`` is a hard failure. There is no retry.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def submit(self, patient_name: str, diagnosis: str) -> str:
        """Submit a report and return the national id the registry assigned."""
        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/submit",
                    json={"patientName": patient_name, "diagnosis": diagnosis},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Registry submit timed out after %.1fs", time.time() - start)
            raise RegistryError("National registry timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning("Registry submit rejected with HTTP %s", e.response.status_code)
            raise RegistryError() from e
        except httpx.HTTPError as e:
            logger.warning("Registry submit failed: %s", e)
            raise RegistryError() from e
        except ValueError as e:
            logger.warning("Registry returned a non-JSON reply")
            raise RegistryError("National registry returned a malformed reply") from e

        national_id = data.get("nationalId") if isinstance(data, dict) else None
        if not isinstance(national_id, str) or not national_id.strip():
            logger.warning("Registry reply carried no nationalId")
            raise RegistryError("National registry returned a malformed reply")
        logger.info("Registry accepted submission in %dms", int((time.time() - start) * 1000))
        return national_id

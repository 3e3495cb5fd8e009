"""
Endpoint resolution - picks the first live machine learning server.

Candidates come from a semicolon separated URL setting and are probed
strictly in order with a single GET each. The first one answering 200 wins;
later candidates are not contacted.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import httpx

from ml_dispatch.core.config import settings
from ml_dispatch.core.logging import get_logger
from ml_dispatch.model_client.errors import ERROR_PREFIX, NoAvailableServer


@dataclass(frozen=True)
class ProbeSuccess:
    """The candidate answered; any status, not only 200."""
    url: str
    status: int

    @property
    def is_live(self) -> bool:
        return self.status == 200


@dataclass(frozen=True)
class ProbeFailure:
    """The probe never got an answer (timeout, refused, DNS, bad URL)."""
    url: str
    cause: BaseException

    @property
    def is_live(self) -> bool:
        return False


ProbeResult = Union[ProbeSuccess, ProbeFailure]


def parse_server_list(url: str) -> List[str]:
    """Split a `;` separated server setting into candidates, in order."""
    return [item.strip() for item in url.split(";") if item.strip()]


class EndpointResolver:
    """
    Resolves a candidate list to one live server address.

    Usage:
        resolver = EndpointResolver(probe_timeout=5.0)
        url = await resolver.resolve(client, "http://ml-1:3003;http://ml-2:3003")
    """

    def __init__(
        self,
        probe_timeout: Optional[float] = None,
        health_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.probe_timeout = probe_timeout if probe_timeout is not None else settings.probe_timeout
        self.health_path = health_path if health_path is not None else settings.health_path
        self.logger = logger or get_logger("model_client.resolver")

    def probe_url(self, url: str) -> str:
        """URL the liveness probe is sent to for a candidate."""
        if not self.health_path:
            return url
        return url.rstrip("/") + "/" + self.health_path.lstrip("/")

    async def probe(self, client: httpx.AsyncClient, url: str) -> ProbeResult:
        """Send one liveness probe. Never raises for network failures."""
        try:
            response = await client.get(self.probe_url(url), timeout=self.probe_timeout)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            return ProbeFailure(url=url, cause=e)
        return ProbeSuccess(url=url, status=response.status_code)

    async def resolve(
        self,
        client: httpx.AsyncClient,
        urls: Union[str, Sequence[str]],
    ) -> str:
        """
        Return the first candidate whose probe answers 200.

        Args:
            client: HTTP client used for the probes
            urls: `;` separated string or an already split sequence

        Returns:
            The live candidate address, as given

        Raises:
            NoAvailableServer: If no candidate is live after one full pass
        """
        if isinstance(urls, str):
            server_list = urls
            candidates = parse_server_list(urls)
        else:
            candidates = [url.strip() for url in urls if url.strip()]
            server_list = ";".join(candidates)

        for url in candidates:
            result = await self.probe(client, url)
            if result.is_live:
                self.logger.debug(f"Response from {url}")
                return url
            if isinstance(result, ProbeFailure):
                self.logger.warning(f'{ERROR_PREFIX} ping to "{url}" failed with {result.cause!r}')
            else:
                self.logger.warning(
                    f'{ERROR_PREFIX} ping to "{url}" answered with status {result.status}'
                )

        raise NoAvailableServer(server_list)

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from .base import DataSource, LanguageMap, RepositoryDescriptor
from ..config import UpstreamConfig
from ..errors import TransportError, UpstreamError, UpstreamNotFound
from ..services.cache import ResponseCache


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    text: str
    from_cache: bool = False

    def json(self) -> Any:
        return json.loads(self.text)


class GitHubAdapter(DataSource):
    def __init__(
        self,
        config: UpstreamConfig,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.cache = cache if cache is not None else ResponseCache()
        credentials = f"{config.client_id}:{config.client_secret}".encode("utf-8")
        self.headers = {
            "User-Agent": config.owner,
            "Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}",
            "Accept": f"application/vnd.github.{config.api_version}.raw+json",
        }
        client_kwargs: Dict[str, Any] = {
            "base_url": config.base_url,
            "timeout": config.timeout,
        }
        if config.proxy:
            client_kwargs["proxy"] = config.proxy
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

    @property
    def owner(self) -> str:
        return self.config.owner

    async def aclose(self):
        await self.client.aclose()

    async def fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> UpstreamResponse:
        """GET ``path`` relative to the API root, served from the cache when possible.

        Only 200 responses are cached. Network failures surface as
        ``TransportError``; there are no retries.
        """
        request = self.client.build_request("GET", path, params=params, headers=self.headers)
        url = str(request.url)
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug(f"[upstream] cache hit {url}")
            return UpstreamResponse(200, cached, from_cache=True)

        logger.debug(f"[upstream] cache miss {url}")
        try:
            resp = await self.client.send(request)
        except httpx.RequestError as exc:
            raise TransportError(f"GitHub request error: {type(exc).__name__} {exc}") from exc

        if resp.status_code == 200:
            self.cache.set(url, resp.text)
        else:
            logger.warning(f"[upstream] {url} answered {resp.status_code}")
        return UpstreamResponse(resp.status_code, resp.text)

    async def list_repositories(self) -> List[RepositoryDescriptor]:
        logger.info("Getting all repos")
        resp = await self.fetch(f"users/{self.owner}/repos", params={"sort": "created"})
        if resp.status_code != 200:
            raise UpstreamError(
                resp.text, code=resp.status_code, content_type="application/javascript"
            )
        return [RepositoryDescriptor(item) for item in resp.json()]

    async def get_languages(self, repo: str) -> LanguageMap:
        return json.loads(await self.get_languages_text(repo))

    async def get_languages_text(self, repo: str) -> str:
        logger.info(f"Getting languages for repo {repo}")
        resp = await self._fetch_for_repo(f"repos/{self.owner}/{repo}/languages", repo)
        if resp.status_code == 404:
            raise UpstreamNotFound("languages not found", repo=repo)
        self._raise_for_status(resp, repo)
        return resp.text

    async def get_readme(self, repo: str) -> str:
        logger.info(f"Getting README for repo {repo}")
        resp = await self._fetch_for_repo(f"repos/{self.owner}/{repo}/contents/README.md", repo)
        if resp.status_code == 404:
            raise UpstreamNotFound("README.md not found", repo=repo)
        self._raise_for_status(resp, repo)
        return resp.text

    async def get_last_commit(self, repo: str) -> Dict[str, Any]:
        logger.info(f"Getting last commit for repo {repo}")
        resp = await self._fetch_for_repo(f"repos/{self.owner}/{repo}/commits", repo)
        if resp.status_code == 404:
            raise UpstreamNotFound("Commit history not found", repo=repo)
        self._raise_for_status(resp, repo)
        commits = resp.json()
        if not commits:
            raise UpstreamNotFound("Commit history not found", repo=repo)
        return commits[0]

    async def _fetch_for_repo(self, path: str, repo: str) -> UpstreamResponse:
        try:
            return await self.fetch(path)
        except TransportError as exc:
            exc.repo = repo
            raise

    @staticmethod
    def _raise_for_status(resp: UpstreamResponse, repo: str):
        if resp.status_code != 200:
            raise UpstreamError(
                resp.text, code=resp.status_code, repo=repo, content_type="text/html"
            )

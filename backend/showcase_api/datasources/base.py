from typing import Dict, List, Protocol

LanguageMap = Dict[str, int]


class RepositoryDescriptor(dict):
    """Lightweight mapping over one entry of the owner's repository listing."""

    name: str
    created_at: str


class DataSource(Protocol):
    async def list_repositories(self) -> List[RepositoryDescriptor]:
        ...

    async def get_languages(self, repo: str) -> LanguageMap:
        ...

"""Cross-repository language totals for the owner's whole account."""

import asyncio
from typing import Dict, Iterable, List, Optional

from loguru import logger

from ..datasources.base import DataSource, LanguageMap
from ..errors import UpstreamNotFound
from ..schemas import LanguageAggregate, LanguageRecord


def merge_language_maps(maps: Iterable[LanguageMap]) -> Dict[str, int]:
    """Sum byte counts per language.

    Keys keep the order in which a language was first seen, so the merge
    order only affects ordering, never the totals.
    """
    totals: Dict[str, int] = {}
    for language_map in maps:
        for language, size in language_map.items():
            totals[language] = totals.get(language, 0) + size
    return totals


def to_records(totals: Dict[str, int]) -> List[LanguageRecord]:
    return [LanguageRecord(language=language, value=value) for language, value in totals.items()]


async def aggregate_languages(
    source: DataSource,
    concurrency: int = 0,
    skip_missing: bool = False,
) -> LanguageAggregate:
    """Fetch every repository's languages concurrently and merge them.

    A failed repository listing fails the whole call. By default so does any
    single failed language lookup: the first failure in repository order is
    re-raised once every lookup has settled. With ``skip_missing`` a
    repository answering 404 (an empty repository, typically) contributes
    nothing and is reported in ``skipped_repos``; other failures still abort.
    """
    repos = await source.list_repositories()
    names = [repo["name"] for repo in repos]
    logger.info(f"[languages] aggregating {len(names)} repos")

    semaphore: Optional[asyncio.Semaphore] = asyncio.Semaphore(concurrency) if concurrency > 0 else None

    async def fetch_one(name: str) -> LanguageMap:
        if semaphore is None:
            return await source.get_languages(name)
        async with semaphore:
            return await source.get_languages(name)

    results = await asyncio.gather(*(fetch_one(name) for name in names), return_exceptions=True)

    maps: List[LanguageMap] = []
    skipped: List[str] = []
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            if skip_missing and isinstance(result, UpstreamNotFound):
                logger.warning(f"[languages] skipping {name}: {result.message}")
                skipped.append(name)
                continue
            # first failure by repository position, not by completion time
            logger.warning(f"[languages] aborting aggregation, {name} failed: {result}")
            raise result
        maps.append(result)

    records = to_records(merge_language_maps(maps))
    logger.info(f"[languages] {len(records)} languages across {len(maps)} repos")
    return LanguageAggregate(records=records, skipped_repos=skipped)

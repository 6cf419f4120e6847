from typing import List

from pydantic import BaseModel


class LanguageRecord(BaseModel):
    language: str
    value: int


class LanguageAggregate(BaseModel):
    records: List[LanguageRecord]
    skipped_repos: List[str] = []


class LastCommit(BaseModel):
    link: str
    date: str
    message: str

from typing import Optional


class UpstreamError(Exception):
    """A GitHub call that did not produce the data a handler needs.

    Carries everything required to answer the client: the status code to
    send, the message (usually the upstream body, verbatim), the repository
    it concerns and the content type declared for that failure.
    """

    def __init__(
        self,
        message: str = "",
        code: int = 500,
        repo: Optional[str] = None,
        content_type: str = "text/plain",
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.repo = repo
        self.content_type = content_type

    def render(self) -> str:
        if self.repo:
            return f'{self.message} for repo "{self.repo}"'
        return self.message


class UpstreamNotFound(UpstreamError):
    def __init__(self, message: str, repo: Optional[str] = None):
        super().__init__(message, code=404, repo=repo)


class TransportError(UpstreamError):
    def __init__(self, message: str, repo: Optional[str] = None):
        super().__init__(message, code=500, repo=repo)

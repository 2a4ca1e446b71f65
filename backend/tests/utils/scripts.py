"""Route script sources and a counting source reader shared by tests."""

from scriptgate.engines.script import LoadError

FULL_SCRIPT = """
def middleware(request, response):
    response.headers["X-Trace"] = "middleware"


def handler(request, response):
    response.headers["X-Trace"] = response.headers["X-Trace"] + ",handler"
    response.body = "handled " + request.method + " " + request.path


def response_hook(request, response):
    response.headers["X-Trace"] = response.headers.get("X-Trace", "") + ",hook"
"""

HANDLER_ONLY_SCRIPT = """
def handler(request, response):
    response.headers["Content-Type"] = "text/plain"
    response.body = "only handler"
"""

INTERCEPT_SCRIPT = """
def middleware(request, response):
    response.status = 403
    response.body = "forbidden"


def handler(request, response):
    response.body = "SECRET"


def response_hook(request, response):
    response.headers["X-Hooked"] = "yes"
"""

HANDLER_RAISES_SCRIPT = """
def handler(request, response):
    response.body = "partial"
    raise ValueError("boom")


def response_hook(request, response):
    response.headers["X-Hooked"] = "yes"
"""

NO_HANDLER_SCRIPT = """
def middleware(request, response):
    response.status = 204
"""

SYNTAX_ERROR_SCRIPT = "def handler(request, response)\n    pass\n"


class CountingReader:
    """read(script_id) -> source from a dict; records every read."""

    def __init__(self, sources: dict[str, str]) -> None:
        self.sources = dict(sources)
        self.calls: list[str] = []

    def __call__(self, script_id: str) -> str:
        self.calls.append(script_id)
        try:
            return self.sources[script_id]
        except KeyError as e:
            raise LoadError(script_id, "no such script") from e

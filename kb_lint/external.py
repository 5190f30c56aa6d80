"""Checking external http(s) links over the network."""

from concurrent.futures import ThreadPoolExecutor

import requests

from .config import ExternalConfig
from .issues import Issue, make_issue


def check_url(url: str, timeout: float, user_agent: str) -> tuple[str, int | str]:
    """Returns (url, status code) or (url, error text)."""
    headers = {"User-Agent": user_agent}
    try:
        # HEAD first for speed
        response = requests.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        if response.status_code >= 400:
            # Some sites refuse HEAD but serve GET
            response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        return url, response.status_code
    except Exception as e:
        # urllib3 raises LocationParseError (a ValueError) for malformed hosts
        return url, str(e) or type(e).__name__


def is_broken(status: int | str) -> bool:
    return not isinstance(status, int) or status >= 400


def check_external(occurrences: dict[str, list[tuple[str, int]]],
                   settings: ExternalConfig) -> list[Issue]:
    """Check each unique URL once, report it wherever it is used."""
    urls = sorted(occurrences)
    if not urls:
        return []

    with ThreadPoolExecutor(max_workers=settings.workers) as executor:
        results = list(executor.map(
            lambda u: check_url(u, settings.timeout, settings.user_agent), urls
        ))

    issues = []
    for url, status in results:
        if not is_broken(status):
            continue
        detail = f"status {status}" if isinstance(status, int) else status
        for path, line in occurrences[url]:
            issues.append(make_issue("external-broken", path, line, f"{url} ({detail})"))
    return issues

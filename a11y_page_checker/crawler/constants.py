# a11y_page_checker/crawler/constants.py
"""Limits shared by sitemap discovery, website discovery and the tester."""
from __future__ import annotations

from typing import Final

#: wall-clock budget of one discovery run (seconds)
MAX_CRAWL_TIME: Final[float] = 5 * 60
#: a URL whose redirect count exceeds this is skipped
MAX_REDIRECTS: Final[int] = 5
#: pause between website-crawl batches and between tester chunks (seconds)
BATCH_DELAY: Final[float] = 1.0
#: pause between navigation retries of the website crawler (seconds)
NAVIGATION_RETRY_DELAY: Final[float] = 1.0

#: Playwright device descriptor used for every browser context
DEVICE: Final[str] = "Desktop Chrome"

#: links to these resources are never crawled as pages
SKIP_EXTENSIONS: Final[tuple[str, ...]] = (
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico",
    ".zip", ".gz", ".tar", ".mp3", ".mp4", ".avi", ".mov",
)

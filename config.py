# Root folder: issuewatch/config.py
# Central config file - all settings live here
# Every other file imports from here instead of reading env directly

import os
from dotenv import load_dotenv

load_dotenv()

VERSION = "0.1.0"


def _split_list(raw):
    """Comma separated env value -> list of non-empty stripped names"""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


# GitHub credentials
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_REPO = os.getenv("GITHUB_REPO")

# Where reporting is switched on (matched against APP_ENV / FLASK_ENV)
REPORT_ENVIRONMENTS = _split_list(os.getenv("ISSUEWATCH_ENVIRONMENTS", "production"))

# Issue metadata
ISSUE_LABELS = _split_list(os.getenv("ISSUEWATCH_LABELS"))
ISSUE_ASSIGNEES = _split_list(os.getenv("ISSUEWATCH_ASSIGNEES"))

# Exception class names never turned into issues (subclasses included)
IGNORED_EXCEPTIONS = _split_list(os.getenv("ISSUEWATCH_IGNORED_EXCEPTIONS"))

# false = report inline in the request thread (useful in tests)
REPORT_ASYNC = os.getenv("ISSUEWATCH_ASYNC", "true").lower() == "true"

# Demo app settings
APP_PORT = int(os.getenv("APP_PORT", 5000))

# GitHub API settings
GITHUB_API_BASE = os.getenv("GITHUB_API_BASE", "https://api.github.com")
REQUEST_TIMEOUT_SEC = 10       # single shot, no retries

# Folder: issuewatch/scripts/check_github.py
# Quick check that GITHUB_TOKEN can read GITHUB_REPO.
# Run with: python scripts/check_github.py
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import requests
from actions.github_issues import GithubIssueClient, TrackerAPIError
import config


def check():
    if not config.GITHUB_TOKEN or not config.GITHUB_REPO:
        print("❌ GITHUB_TOKEN and GITHUB_REPO must be set (see .env.example)")
        return 1

    client = GithubIssueClient(config.GITHUB_TOKEN, config.GITHUB_REPO)
    try:
        full_name = client.check_access()
    except TrackerAPIError as e:
        print(f"❌ GitHub rejected the token or repo: {e}")
        return 1
    except requests.RequestException as e:
        print(f"❌ Could not reach GitHub: {e}")
        return 1

    print(f"✅ Connected to repo: {full_name}")
    return 0


if __name__ == "__main__":
    sys.exit(check())

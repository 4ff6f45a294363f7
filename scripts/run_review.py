#!/usr/bin/env python3
"""Run a PR review locally against a saved event payload.

Expects GITHUB_EVENT_PATH and the other action inputs in .env.
"""
from dotenv import load_dotenv

load_dotenv()

from src.main import run

if __name__ == "__main__":
    raise SystemExit(run())

#!/usr/bin/env python3
"""
Wrapper script to run the shipyard operator.

Loads environment variables from `.env` (or the file named by ENV_FILE)
BEFORE the settings module reads them, then runs the operator until
SIGINT or SIGTERM.

Usage:
    python run_operator.py
    LOG_LEVEL=DEBUG ENV_FILE=prod.env python run_operator.py
"""

import os
import logging
from dotenv import load_dotenv, find_dotenv

env_file = os.environ.get("ENV_FILE", ".env")
path = find_dotenv(filename=env_file, usecwd=True)
if path:
    print(f"Loading environment variables from {path}")
    load_dotenv(dotenv_path=path)

import asyncio  # noqa: E402

if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Import the operator after the environment is loaded
    from shipyard.app import main  # noqa: E402

    asyncio.run(main())

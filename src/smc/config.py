"""Defaults for the chain tools. Environment variables override them."""

import os

# Longest sentence the REPL composes, in characters
DEFAULT_MAX_LEN = int(os.environ.get("SMC_MAX_LEN", "450"))

# Built-in selector used when none is named: weighted | highest | lowest | naive
DEFAULT_SELECTOR = os.environ.get("SMC_SELECTOR", "weighted")

DB_CONFIG = {
    "dbname": os.environ.get("SMC_DB_NAME", "smc"),
    "user": os.environ.get("SMC_DB_USER", "smc"),
    "password": os.environ.get("SMC_DB_PASSWORD", "smc_dev"),
    "host": os.environ.get("SMC_DB_HOST", "localhost"),
    "port": int(os.environ.get("SMC_DB_PORT", "5432")),
}

# Seconds to wait on an HTTP corpus download
FETCH_TIMEOUT = float(os.environ.get("SMC_FETCH_TIMEOUT", "30"))

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

from __future__ import annotations
import os
from dotenv import load_dotenv

load_dotenv()

# Dataset: CSV with a header row; column 2 = title, column 9 = rating
DATASET_PATH: str = os.getenv("PROMPTER_DATASET", "./imdb-movies.csv")
TITLE_COLUMN: int = 1
RATING_COLUMN: int = 8
CAPTURE_RATINGS: bool = True

# /* ~~~ sibling inference service ("pyapp") ~~~ */
REMOTE_HOST: str = os.getenv("PROMPTER_HOST", "pyapp:80")
PING_PATH: str = "/ping"
QUERY_PATH: str = "/q"
REQUEST_TIMEOUT: float = float(os.getenv("PROMPTER_TIMEOUT", "5.0"))

# /* ~~~ readiness probing ~~~ */
PING_INTERVAL: float = float(os.getenv("PROMPTER_PING_INTERVAL", "5.0"))

# Candidate set capacity (local + remote)
MAX_PROMPTS: int = int(os.getenv("PROMPTER_MAX_PROMPTS", "5"))

# "strict": remote failure fails the query; "degraded": fall back to local prompts
REMOTE_MODE: str = os.getenv("PROMPTER_REMOTE_MODE", "strict")
REMOTE_MODES = ("strict", "degraded")

VERBOSE: bool = os.getenv("PROMPTER_VERBOSE") == "1"

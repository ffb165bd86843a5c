"""
Search Prompter

Interactive movie-title search assistance. As a query is typed, the prompter
proposes corrected or completed phrases drawn from a word-frequency index over
a movie dataset and from a sibling inference service, ranked by movie rating.

Main pieces:
    normalize(text): canonical lowercase a-z/0-9/space form
    load_dataset(path): build the frequency and rating indexes
    EditDistanceOracle: default edit-distance spelling corrector
    RemoteClient: candidate + health requests to the inference service
    ReadinessCoordinator: periodic health probing, one-shot ready signal
    PromptEngine.generate_candidates(query): the CandidateSet for a query
    Prompter: lifecycle wrapper used by the CLI and the web session

Example Usage:
    from prompter import Prompter

    p = Prompter()
    p.build("imdb-movies.csv", host="pyapp:80")
    p.wait_until_ready()
    for prompt in p.complete("the matriks"):
        print(prompt)
"""

from .engine import PromptEngine, Prompter
from .errors import PrompterError, DatasetError, RemoteServiceError
from .loader import load_dataset
from .models import CandidateSet, DatasetIndexes, Record
from .normalize import normalize
from .readiness import ReadinessCoordinator
from .remote import RemoteClient
from .spelling import EditDistanceOracle, SpellingOracle

__version__ = "1.0.0"
__all__ = [
    "PromptEngine", "Prompter",
    "PrompterError", "DatasetError", "RemoteServiceError",
    "load_dataset", "CandidateSet", "DatasetIndexes", "Record",
    "normalize", "ReadinessCoordinator", "RemoteClient",
    "EditDistanceOracle", "SpellingOracle",
]

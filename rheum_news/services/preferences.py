from __future__ import annotations

import copy
from typing import Any, Dict

# Preferences are not stored anywhere yet; GET serves these, PUT echoes the body.
DEFAULT_PREFERENCES: Dict[str, Any] = {
    "priorityCategories": ["Drug Approval", "Biologics", "Research"],
    "sources": ["News Article", "PubMed", "FDA"],
    "keywords": ["rheumatoid arthritis", "biologics", "FDA approval"],
    "viewMode": "bullets",
    "notifications": {
        "highPriority": True,
        "dailyDigest": False,
        "weeklyRoundup": True,
    },
    "display": {
        "articlesPerPage": 20,
        "showRelevanceScores": True,
        "compactMode": False,
    },
}


def get_preferences() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_PREFERENCES)

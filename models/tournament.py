from enum import Enum
from typing import Dict, Optional

from models.document import CamelModel

MAX_TOURNAMENT_NAME_LENGTH = 25
MAX_DESCRIPTION_LENGTH = 60


class TournamentFormat(str, Enum):
    ACCUMULATIVE = "accumulative"
    BRACKET = "bracket"


class TournamentState(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    COMPLETED = "completed"
    FINISHED = "finished"


class MemberRole(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


class GameType(str, Enum):
    FFA = "ffa"
    TEAM = "team"


class GamePreset(str, Enum):
    QUICK = "quick"
    MEDIUM = "medium"
    BIG = "big"
    BRACKET = "bracket"


class ScoringRules(CamelModel):
    first: float
    second: float
    third: float
    others: float


GAME_PRESETS: Dict[GamePreset, ScoringRules] = {
    GamePreset.QUICK: ScoringRules(first=3, second=2, third=1, others=0),
    GamePreset.MEDIUM: ScoringRules(first=5, second=3, third=1, others=0),
    GamePreset.BIG: ScoringRules(first=8, second=5, third=2, others=0),
    GamePreset.BRACKET: ScoringRules(first=1, second=0, third=0, others=0),
}


def default_scoring(preset: str) -> Optional[dict]:
    """Scoring rules a session gets when the client does not send any."""
    try:
        rules = GAME_PRESETS[GamePreset(preset)]
    except ValueError:
        return None
    return rules.model_dump()

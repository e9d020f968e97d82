from typing import List, NamedTuple, Optional

from models.document import DocumentKind

USERS = "users"
LIBRARIES = "libraries"
TOURNAMENTS = "tournaments"
GAME_SESSIONS = "gameSessions"


class InvalidPath(ValueError):
    pass


class DocumentPath(NamedTuple):
    kind: DocumentKind
    path: str
    segments: List[str]
    document_id: str
    owner_id: Optional[str] = None
    parent_path: Optional[str] = None

    @property
    def parent_id(self) -> Optional[str]:
        if self.parent_path is None:
            return None
        return self.parent_path.rsplit("/", 1)[-1]


def parse_path(path: str) -> DocumentPath:
    """Resolve a storage location to the kind of document stored there.

    users/{uid}/libraries/{libraryId}                -> library item
    tournaments/{tournamentId}                       -> tournament
    tournaments/{tournamentId}/gameSessions/{id}     -> game session
    """
    segments = (path or "").strip("/").split("/")
    if any(segment == "" for segment in segments):
        raise InvalidPath(f"Malformed document path: {path!r}")
    normalized = "/".join(segments)

    if len(segments) == 4 and segments[0] == USERS and segments[2] == LIBRARIES:
        return DocumentPath(DocumentKind.LIBRARY_ITEM, normalized, segments,
                            document_id=segments[3], owner_id=segments[1])
    if len(segments) == 2 and segments[0] == TOURNAMENTS:
        return DocumentPath(DocumentKind.TOURNAMENT, normalized, segments, document_id=segments[1])
    if len(segments) == 4 and segments[0] == TOURNAMENTS and segments[2] == GAME_SESSIONS:
        return DocumentPath(DocumentKind.GAME_SESSION, normalized, segments,
                            document_id=segments[3], parent_path="/".join(segments[:2]))
    raise InvalidPath(f"Unknown document path: {path!r}")


def tournament_path(tournament_id: str) -> str:
    return f"{TOURNAMENTS}/{tournament_id}"


def game_session_path(tournament_id: str, session_id: str) -> str:
    return f"{TOURNAMENTS}/{tournament_id}/{GAME_SESSIONS}/{session_id}"

"""Per-kind document schemas.

Each schema runs every one of its checks against the incoming document (no short
circuit) so the caller gets the full list of what is wrong. Checks that follow a
reference into another part of the data, such as a bracket match naming a player,
are tagged ``reference`` so the evaluator can report them separately.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence

from models.decision import CheckResult
from models.document import DocumentKind
from models.library import BoxSizeClass, GameCondition, LibraryItemStatus, Visibility
from models.tournament import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TOURNAMENT_NAME_LENGTH,
    GamePreset,
    GameType,
    MemberRole,
    TournamentFormat,
    TournamentState,
)
from services.paths import DocumentPath
from services.validators import (
    bounded_list,
    bounded_string,
    enum_member,
    enum_values,
    integer,
    is_absent,
    is_bool,
    is_map,
    non_negative_number,
    optional_bounded_string,
    optional_integer,
    optional_non_negative_number,
    optional_number_in_range,
    string_list,
    timestamp_like,
)

LIBRARY_STATUSES = enum_values(LibraryItemStatus)
BOX_SIZES = enum_values(BoxSizeClass)
CONDITIONS = enum_values(GameCondition)
VISIBILITIES = enum_values(Visibility)
FORMATS = enum_values(TournamentFormat)
STATES = enum_values(TournamentState)
MEMBER_ROLES = enum_values(MemberRole)
GAME_TYPES = enum_values(GameType)
PRESETS = enum_values(GamePreset)

SCORING_PLACES = ("first", "second", "third", "others")

IMMUTABLE_FIELDS: Dict[DocumentKind, Sequence[str]] = {
    DocumentKind.LIBRARY_ITEM: ("libraryId",),
    DocumentKind.TOURNAMENT: ("ownerId",),
    DocumentKind.GAME_SESSION: ("tournamentId",),
}


class SchemaReport:
    def __init__(self):
        self.results: List[CheckResult] = []

    def check(self, field: str, check: str, passed: bool, actual: Any = None,
              expected: Optional[str] = None, category: str = "field") -> bool:
        self.results.append(CheckResult(
            field=field,
            check=check,
            passed=bool(passed),
            actual=actual,
            expected=expected,
            category=category,
        ))
        return bool(passed)

    def reference(self, field: str, check: str, passed: bool, actual: Any = None,
                  expected: Optional[str] = None) -> bool:
        return self.check(field, check, passed, actual, expected, category="reference")


def failures(results: List[CheckResult]) -> List[CheckResult]:
    return [result for result in results if not result.passed]


def _player_ids(players: Any) -> List[str]:
    if not isinstance(players, list):
        return []
    return [p["id"] for p in players if is_map(p) and isinstance(p.get("id"), str)]


def check_library_item(doc: dict, path: DocumentPath, parent: Optional[dict] = None) -> List[CheckResult]:
    report = SchemaReport()
    get = doc.get

    report.check("libraryId", "matches path libraryId", get("libraryId") == path.document_id,
                 get("libraryId"), path.document_id)
    report.check("gameId", "bounded_string(50)", bounded_string(get("gameId"), 50), get("gameId"))
    report.check("gameName", "bounded_string(100)", bounded_string(get("gameName"), 100), get("gameName"))
    report.check("gameThumbnail", "optional_bounded_string(500)",
                 optional_bounded_string(get("gameThumbnail"), 500), get("gameThumbnail"))
    report.check("gameYear", "optional_non_negative_number()",
                 optional_non_negative_number(get("gameYear")), get("gameYear"))
    report.check("status", f"in {sorted(LIBRARY_STATUSES)}", enum_member(get("status"), LIBRARY_STATUSES),
                 get("status"))
    report.check("quantity", "non_negative_number()", non_negative_number(get("quantity")), get("quantity"))
    report.check("myRating", "null or number in [0, 10]", optional_number_in_range(get("myRating"), 0, 10),
                 get("myRating"), "null or 0-10")
    report.check("favorite", "is bool", is_bool(get("favorite")), get("favorite"))
    report.check("notes", "optional_bounded_string(500)", optional_bounded_string(get("notes"), 500),
                 get("notes"))
    report.check("tags", "bounded_list(20)", bounded_list(get("tags"), 20), get("tags"))
    report.check("playCount", "non_negative_number()", non_negative_number(get("playCount")), get("playCount"))
    for field in ("lastPlayedAt", "firstPlayedAt"):
        report.check(field, "null or timestamp_like()", timestamp_like(get(field)), get(field))
    for field in ("forTrade", "forSale"):
        report.check(field, "is bool", is_bool(get(field)), get(field))
    report.check("boxSizeClass", f"null or in {sorted(BOX_SIZES)}",
                 enum_member(get("boxSizeClass"), BOX_SIZES, optional=True), get("boxSizeClass"))
    for field in ("boxWidthMm", "boxHeightMm", "boxDepthMm"):
        report.check(field, "optional_non_negative_number()", optional_non_negative_number(get(field)), get(field))
    for field in ("shelfCellIndex", "cellPosition"):
        report.check(field, "null or is int", optional_integer(get(field)), get(field))
    report.check("condition", f"null or in {sorted(CONDITIONS)}",
                 enum_member(get("condition"), CONDITIONS, optional=True), get("condition"))
    report.check("language", "optional_bounded_string(50)", optional_bounded_string(get("language"), 50),
                 get("language"))
    report.check("edition", "optional_bounded_string(100)", optional_bounded_string(get("edition"), 100),
                 get("edition"))
    report.check("visibilityOverride", f"null or in {sorted(VISIBILITIES)}",
                 enum_member(get("visibilityOverride"), VISIBILITIES, optional=True), get("visibilityOverride"))
    for field in ("createdAt", "updatedAt"):
        report.check(field, "timestamp_like()", timestamp_like(get(field)), get(field))
    return report.results


def _check_players(report: SchemaReport, players: Any):
    if not report.check("players", "non-empty list", isinstance(players, list) and len(players) > 0,
                        players):
        return
    seen = set()
    for index, player in enumerate(players):
        prefix = f"players[{index}]"
        if not report.check(prefix, "is map", is_map(player), player):
            continue
        report.check(f"{prefix}.id", "bounded_string(100)", bounded_string(player.get("id"), 100),
                     player.get("id"))
        report.check(f"{prefix}.name", "bounded_string(50)", bounded_string(player.get("name"), 50),
                     player.get("name"))
        report.check(f"{prefix}.color", "optional_bounded_string(20)",
                     optional_bounded_string(player.get("color"), 20), player.get("color"))
        report.check(f"{prefix}.userId", "optional_bounded_string(128)",
                     optional_bounded_string(player.get("userId"), 128), player.get("userId"))
        player_id = player.get("id")
        if isinstance(player_id, str):
            report.check(f"{prefix}.id", "unique among players", player_id not in seen, player_id)
            seen.add(player_id)


def _check_membership(report: SchemaReport, doc: dict):
    owner_id = doc.get("ownerId")
    member_ids = doc.get("memberIds")
    member_roles = doc.get("memberRoles")

    report.check("ownerId", "bounded_string(128)", bounded_string(owner_id, 128), owner_id)
    members_ok = report.check("memberIds", "non-empty list of strings",
                              string_list(member_ids) and len(member_ids) > 0, member_ids)
    report.check("memberIds", "contains ownerId", members_ok and owner_id in member_ids,
                 member_ids, f"list containing {owner_id!r}")

    if not report.check("memberRoles", "null or map", is_absent(member_roles) or is_map(member_roles),
                        member_roles):
        return
    if is_absent(member_roles):
        return
    for member, role in member_roles.items():
        report.check(f"memberRoles.{member}", f"in {sorted(MEMBER_ROLES)}",
                     enum_member(role, MEMBER_ROLES), role)
        report.check(f"memberRoles.{member}", "key in memberIds",
                     members_ok and member in member_ids, member)
    if isinstance(owner_id, str) and owner_id in member_roles:
        report.check(f"memberRoles.{owner_id}", "owner entry is 'owner'",
                     member_roles[owner_id] == MemberRole.OWNER.value, member_roles[owner_id], "owner")


def _check_bracket_config(report: SchemaReport, config: Any, player_ids: List[str]):
    if not report.check("bracketConfig", "is map", is_map(config), config):
        return
    get = config.get
    report.check("bracketConfig.gameTitle", "bounded_string(100)", bounded_string(get("gameTitle"), 100),
                 get("gameTitle"))

    total_rounds = get("totalRounds")
    rounds_ok = report.check("bracketConfig.totalRounds", "integer >= 1",
                             integer(total_rounds) and total_rounds >= 1, total_rounds)
    current_round = get("currentRound")
    report.check("bracketConfig.currentRound", "integer > 0", integer(current_round) and current_round > 0,
                 current_round)
    report.check("bracketConfig.currentRound", "<= totalRounds",
                 rounds_ok and integer(current_round) and current_round <= total_rounds,
                 current_round, f"<= {total_rounds!r}")
    report.check("bracketConfig.hasStarted", "is bool", is_bool(get("hasStarted")), get("hasStarted"))

    matches = get("bracket")
    if not report.check("bracketConfig.bracket", "non-empty list", isinstance(matches, list) and len(matches) > 0,
                        matches):
        return
    seen = set()
    for index, match in enumerate(matches):
        prefix = f"bracketConfig.bracket[{index}]"
        if not report.check(prefix, "is map", is_map(match), match):
            continue
        match_id = match.get("id")
        if report.check(f"{prefix}.id", "bounded_string(50)", bounded_string(match_id, 50), match_id):
            report.check(f"{prefix}.id", "unique within bracket", match_id not in seen, match_id)
            seen.add(match_id)
        match_round = match.get("round")
        report.check(f"{prefix}.round", "integer in [1, totalRounds]",
                     integer(match_round) and match_round >= 1 and (not rounds_ok or match_round <= total_rounds),
                     match_round)
        report.check(f"{prefix}.matchNumber", "integer >= 0",
                     integer(match.get("matchNumber")) and match.get("matchNumber") >= 0, match.get("matchNumber"))
        report.check(f"{prefix}.isComplete", "is bool", is_bool(match.get("isComplete")), match.get("isComplete"))

        slots = []
        for slot in ("player1Id", "player2Id"):
            value = match.get(slot)
            report.reference(f"{prefix}.{slot}", "null or a tournament player",
                             is_absent(value) or value in player_ids, value, f"one of {player_ids}")
            if not is_absent(value):
                slots.append(value)
        winner = match.get("winnerId")
        if not is_absent(winner):
            report.reference(f"{prefix}.winnerId", "one of the match players", winner in slots, winner,
                             f"one of {slots}")


def check_tournament(doc: dict, path: DocumentPath, parent: Optional[dict] = None) -> List[CheckResult]:
    report = SchemaReport()
    get = doc.get

    report.check("name", f"bounded_string({MAX_TOURNAMENT_NAME_LENGTH})",
                 bounded_string(get("name"), MAX_TOURNAMENT_NAME_LENGTH), get("name"))
    report.check("description", f"optional_bounded_string({MAX_DESCRIPTION_LENGTH})",
                 optional_bounded_string(get("description"), MAX_DESCRIPTION_LENGTH), get("description"))
    # legacy documents carry no format and are accumulative
    report.check("format", f"null or in {sorted(FORMATS)}", enum_member(get("format"), FORMATS, optional=True),
                 get("format"))
    _check_players(report, get("players"))
    report.check("gameSessions", "null or list of ids",
                 is_absent(get("gameSessions")) or string_list(get("gameSessions")), get("gameSessions"))
    report.check("state", f"in {sorted(STATES)}", enum_member(get("state"), STATES), get("state"))
    report.check("date", "present and timestamp_like()", not is_absent(get("date")) and timestamp_like(get("date")),
                 get("date"))
    _check_membership(report, doc)
    report.check("ownerName", "optional_bounded_string(100)", optional_bounded_string(get("ownerName"), 100),
                 get("ownerName"))
    for field in ("createdAt", "updatedAt"):
        report.check(field, "timestamp_like()", timestamp_like(get(field)), get(field))

    if get("format") == TournamentFormat.BRACKET.value:
        _check_bracket_config(report, get("bracketConfig"), _player_ids(get("players")))
    else:
        report.check("bracketConfig", "absent unless format is 'bracket'", is_absent(get("bracketConfig")),
                     get("bracketConfig"))
    return report.results


def check_game_session(doc: dict, path: DocumentPath, parent: Optional[dict] = None) -> List[CheckResult]:
    report = SchemaReport()
    get = doc.get

    report.check("tournamentId", "matches parent tournament id", get("tournamentId") == path.parent_id,
                 get("tournamentId"), path.parent_id)
    report.check("gameName", "bounded_string(100)", bounded_string(get("gameName"), 100), get("gameName"))
    report.check("gameType", f"null or in {sorted(GAME_TYPES)}",
                 enum_member(get("gameType"), GAME_TYPES, optional=True), get("gameType"))
    report.check("preset", f"in {sorted(PRESETS)}", enum_member(get("preset"), PRESETS), get("preset"))

    scoring = get("scoringRules")
    if report.check("scoringRules", "is map", is_map(scoring), scoring):
        for place in SCORING_PLACES:
            report.check(f"scoringRules.{place}", "non_negative_number()", non_negative_number(scoring.get(place)),
                         scoring.get(place))

    participants = get("participants")
    if report.check("participants", "non-empty list of strings",
                    string_list(participants) and len(participants) > 0, participants):
        report.check("participants", "unique", len(set(participants)) == len(participants), participants)
        known = _player_ids(parent.get("players")) if is_map(parent) else None
        unknown = [p for p in participants if known is None or p not in known]
        report.reference("participants", "subset of tournament players", not unknown, unknown,
                         f"ids from {known}" if known is not None else "parent tournament players")

    report.check("results", "is list", isinstance(get("results"), list), get("results"))
    for field in ("createdAt", "updatedAt"):
        report.check(field, "timestamp_like()", timestamp_like(get(field)), get(field))
    return report.results


SCHEMAS: Dict[DocumentKind, Callable[[dict, DocumentPath, Optional[dict]], List[CheckResult]]] = {
    DocumentKind.LIBRARY_ITEM: check_library_item,
    DocumentKind.TOURNAMENT: check_tournament,
    DocumentKind.GAME_SESSION: check_game_session,
}


def validate_document(path: DocumentPath, document: Any, parent: Optional[dict] = None) -> List[CheckResult]:
    """Run the schema for the document stored at ``path`` and return every check."""
    if not is_map(document):
        return [CheckResult(field="<document>", check="is map", passed=False, actual=document)]
    return SCHEMAS[path.kind](document, path, parent)


def changed_immutable_fields(kind: DocumentKind, existing: dict, incoming: dict) -> List[str]:
    return [
        field for field in IMMUTABLE_FIELDS[kind]
        if existing.get(field) != incoming.get(field)
    ]

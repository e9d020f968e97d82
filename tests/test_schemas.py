from models.document import DocumentKind
from models.tournament import default_scoring
from services.paths import parse_path
from services.schemas import changed_immutable_fields, failures, validate_document
from tests.conftest import LIBRARY_PATH, OWNER, base_tournament, bracket_config, game_session, library_item

TOURNAMENT_PATH = parse_path("tournaments/t1")
SESSION_PATH = parse_path("tournaments/t2/gameSessions/s1")


def failing_fields(results):
    return {result.field for result in failures(results)}


def test_library_item_from_debug_payload_is_valid():
    results = validate_document(parse_path(LIBRARY_PATH), library_item())
    assert failures(results) == []
    assert len(results) == 28


def test_library_item_reports_every_failure():
    item = library_item(libraryId="other", gameName="", quantity=-1, myRating=11, tags=["t"] * 21,
                        boxSizeClass="XXL", shelfCellIndex=1.5, favorite="yes")
    assert failing_fields(validate_document(parse_path(LIBRARY_PATH), item)) == {
        "libraryId", "gameName", "quantity", "myRating", "tags", "boxSizeClass", "shelfCellIndex", "favorite",
    }


def test_library_item_optional_fields_may_be_null_or_missing():
    item = library_item(notes=None, gameYear=None, condition=None, language="", edition=None)
    del item["gameThumbnail"]
    del item["myRating"]
    assert failures(validate_document(parse_path(LIBRARY_PATH), item)) == []

def test_non_mapping_document():
    results = validate_document(TOURNAMENT_PATH, ["not", "a", "map"])
    assert [r.field for r in results] == ["<document>"]
    assert not results[0].passed


def test_accumulative_tournament_is_valid():
    assert failures(validate_document(TOURNAMENT_PATH, base_tournament())) == []


def test_tournament_without_format_is_accumulative():
    tournament = base_tournament()
    del tournament["format"]
    assert failures(validate_document(TOURNAMENT_PATH, tournament)) == []


def test_tournament_name_bound():
    assert failures(validate_document(TOURNAMENT_PATH, base_tournament(name="x" * 25))) == []
    assert failing_fields(validate_document(TOURNAMENT_PATH, base_tournament(name="x" * 26))) == {"name"}


def test_tournament_long_name_and_empty_players():
    results = validate_document(TOURNAMENT_PATH, base_tournament(name="x" * 26, players=[]))
    assert failing_fields(results) == {"name", "players"}


def test_owner_must_be_member():
    results = validate_document(TOURNAMENT_PATH, base_tournament(memberIds=[]))
    assert "memberIds" in failing_fields(results)

    results = validate_document(TOURNAMENT_PATH, base_tournament(memberIds=["someone-else"],
                                                                 memberRoles={"someone-else": "viewer"}))
    assert failing_fields(results) == {"memberIds"}


def test_member_roles_consistency():
    results = validate_document(TOURNAMENT_PATH, base_tournament(memberRoles={OWNER: "editor", "ghost": "viewer"}))
    assert failing_fields(results) == {f"memberRoles.{OWNER}", "memberRoles.ghost"}

    results = validate_document(TOURNAMENT_PATH, base_tournament(memberRoles={OWNER: "admin"}))
    assert f"memberRoles.{OWNER}" in failing_fields(results)


def test_duplicate_player_ids():
    players = [{"id": "p1", "name": "A"}, {"id": "p1", "name": "B"}]
    assert failing_fields(validate_document(TOURNAMENT_PATH, base_tournament(players=players))) == {"players[1].id"}


def test_bracket_requires_config():
    results = validate_document(TOURNAMENT_PATH, base_tournament(format="bracket"))
    assert failing_fields(results) == {"bracketConfig"}


def test_config_not_allowed_without_bracket_format():
    results = validate_document(TOURNAMENT_PATH, base_tournament(bracketConfig=bracket_config()))
    assert failing_fields(results) == {"bracketConfig"}


def test_valid_bracket():
    tournament = base_tournament(format="bracket", bracketConfig=bracket_config())
    assert failures(validate_document(TOURNAMENT_PATH, tournament)) == []


def test_current_round_bounds():
    zero = base_tournament(format="bracket", bracketConfig=bracket_config(currentRound=0))
    assert failing_fields(validate_document(TOURNAMENT_PATH, zero)) == {"bracketConfig.currentRound"}

    beyond = base_tournament(format="bracket", bracketConfig=bracket_config(currentRound=2))
    assert failing_fields(validate_document(TOURNAMENT_PATH, beyond)) == {"bracketConfig.currentRound"}


def test_bracket_references_are_reference_checks():
    config = bracket_config()
    config["bracket"][0]["player2Id"] = "p9"
    config["bracket"][0]["winnerId"] = "p1"
    failed = failures(validate_document(TOURNAMENT_PATH, base_tournament(format="bracket", bracketConfig=config)))
    assert [(r.field, r.category) for r in failed] == [("bracketConfig.bracket[0].player2Id", "reference")]


def test_bracket_winner_must_play_in_match():
    config = bracket_config()
    config["bracket"][0]["winnerId"] = "p3"
    failed = failures(validate_document(TOURNAMENT_PATH, base_tournament(format="bracket", bracketConfig=config)))
    assert [r.field for r in failed] == ["bracketConfig.bracket[0].winnerId"]


def test_bracket_match_ids_unique_and_slots_may_wait():
    matches = [
        {"id": "r1m0", "round": 1, "matchNumber": 0, "player1Id": "p1", "player2Id": "p2", "isComplete": False},
        {"id": "r1m0", "round": 2, "matchNumber": 0, "player1Id": None, "player2Id": None, "isComplete": False},
    ]
    config = bracket_config(totalRounds=2, bracket=matches)
    failed = failures(validate_document(TOURNAMENT_PATH, base_tournament(format="bracket", bracketConfig=config)))
    assert [(r.field, r.check) for r in failed] == [("bracketConfig.bracket[1].id", "unique within bracket")]

def test_game_session_valid_with_parent():
    parent = base_tournament()
    assert failures(validate_document(SESSION_PATH, game_session(), parent)) == []


def test_game_session_with_preset_scoring_is_valid():
    session = game_session(preset="medium", scoringRules=default_scoring("medium"))
    assert failures(validate_document(SESSION_PATH, session, base_tournament())) == []


def test_game_session_field_failures():
    session = game_session(tournamentId="t1", preset="marathon", gameType="coop",
                           scoringRules={"first": 3, "second": -1, "third": 1}, results=None)
    assert failing_fields(validate_document(SESSION_PATH, session, base_tournament())) == {
        "tournamentId", "preset", "gameType", "scoringRules.second", "scoringRules.others", "results",
    }


def test_game_session_participants_must_be_tournament_players():
    failed = failures(validate_document(SESSION_PATH, game_session(participants=["p1", "p7"]), base_tournament()))
    assert [(r.field, r.category, r.actual) for r in failed] == [("participants", "reference", ["p7"])]

    failed = failures(validate_document(SESSION_PATH, game_session(participants=[]), base_tournament()))
    assert [r.field for r in failed] == ["participants"]


def test_game_session_without_parent_cannot_verify_participants():
    failed = failures(validate_document(SESSION_PATH, game_session()))
    assert [(r.field, r.category) for r in failed] == [("participants", "reference")]


def test_changed_immutable_fields():
    assert changed_immutable_fields(DocumentKind.TOURNAMENT, base_tournament(), base_tournament(name="New")) == []
    assert changed_immutable_fields(DocumentKind.TOURNAMENT, base_tournament(),
                                    base_tournament(ownerId="thief")) == ["ownerId"]
    assert changed_immutable_fields(DocumentKind.GAME_SESSION, game_session(),
                                    game_session(tournamentId="t9")) == ["tournamentId"]
    assert changed_immutable_fields(DocumentKind.LIBRARY_ITEM, library_item(),
                                    library_item(libraryId="other")) == ["libraryId"]

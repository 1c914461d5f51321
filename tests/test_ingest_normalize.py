import pytest

from fantasy_recap.errors import StructuralParseError
from fantasy_recap.ingest import (
    as_sequence,
    chunked,
    collect_player_keys,
    load_document,
    parse_league_document,
    parse_league_list,
    parse_player_stats_document,
    parse_xml_tree,
)

from .samples import (
    matchup_xml,
    player_stats_xml,
    player_xml,
    scoreboard_xml,
    team_xml,
    two_matchup_league,
)


def _single_matchup_tree() -> dict:
    return load_document(
        scoreboard_xml(
            [
                matchup_xml(
                    [team_xml("t.1", "Team A", 100.0), team_xml("t.2", "Team B", 90.0)],
                    winner_key="t.1",
                )
            ]
        )
    )


def test_as_sequence_singular_and_single_list_match():
    node = {"name": "Team A"}
    assert as_sequence(node) == as_sequence([node]) == [node]
    assert as_sequence(None) == []
    assert as_sequence("") == []


def test_single_matchup_normalizes_like_one_element_list():
    tree = _single_matchup_tree()
    scoreboard = tree["fantasy_content"]["league"]["scoreboard"]
    assert isinstance(scoreboard["matchups"]["matchup"], dict)

    singular = parse_league_document(tree)
    scoreboard["matchups"]["matchup"] = [scoreboard["matchups"]["matchup"]]
    listed = parse_league_document(tree)

    assert singular == listed
    assert len(singular.matchups) == 1


def test_parse_xml_tree_strips_namespace_and_keeps_attributes():
    tree = parse_xml_tree(scoreboard_xml([]))
    league = tree["fantasy_content"]["league"]
    assert league["name"] == "Test League"
    assert league["scoreboard"]["matchups"] == {"$": {"count": "0"}}


def test_parse_league_document_preserves_order_and_fields():
    league = parse_league_document(load_document(two_matchup_league()))

    assert league.id == "nfl.l.12345"
    assert league.name == "Test League"
    assert league.week == 3
    assert [m.team_a.name for m in league.matchups] == ["Team A", "Team C"]
    first = league.matchups[0]
    assert first.team_a.total_points == pytest.approx(120.5)
    assert first.winner_key == "t.1"
    assert first.winner.name == "Team A"
    assert first.team_a.roster[0].display_name == "Alpha Back"
    assert first.team_a.roster[0].points == pytest.approx(24.3)


def test_missing_matchups_is_structural_error_with_path():
    tree = _single_matchup_tree()
    del tree["fantasy_content"]["league"]["scoreboard"]["matchups"]

    with pytest.raises(StructuralParseError) as excinfo:
        parse_league_document(tree)

    assert excinfo.value.path == ("fantasy_content", "league", "scoreboard", "matchups")
    assert excinfo.value.status_code == 400


def test_missing_league_is_structural_error():
    with pytest.raises(StructuralParseError) as excinfo:
        parse_league_document({"fantasy_content": {}})
    assert excinfo.value.path == ("fantasy_content", "league")


def test_matchup_with_three_teams_is_rejected():
    xml = scoreboard_xml(
        [
            matchup_xml(
                [
                    team_xml("t.1", "Team A", 1.0),
                    team_xml("t.2", "Team B", 2.0),
                    team_xml("t.3", "Team C", 3.0),
                ]
            )
        ]
    )
    with pytest.raises(StructuralParseError, match="expected 2 teams"):
        parse_league_document(load_document(xml))


def test_non_numeric_team_total_is_rejected():
    xml = scoreboard_xml([matchup_xml([team_xml("t.1", "A", "abc"), team_xml("t.2", "B", 1.0)])])
    with pytest.raises(StructuralParseError) as excinfo:
        parse_league_document(load_document(xml))
    assert excinfo.value.path[-2:] == ("team_points", "total")


def test_malformed_xml_is_structural_error():
    with pytest.raises(StructuralParseError) as excinfo:
        load_document("<fantasy_content><league>")
    assert excinfo.value.path == ()


def test_empty_roster_and_missing_winner():
    xml = scoreboard_xml([matchup_xml([team_xml("t.1", "A", 80.0), team_xml("t.2", "B", 82.5)])])
    league = parse_league_document(load_document(xml))
    matchup = league.matchups[0]

    assert matchup.team_a.roster == ()
    assert matchup.winner_key == ""
    assert matchup.winner.name == "B"


def test_empty_matchups_container_yields_no_matchups():
    league = parse_league_document(load_document(scoreboard_xml([])))
    assert league.matchups == ()


def test_player_stats_document_and_keys():
    league = parse_league_document(load_document(two_matchup_league()))
    assert collect_player_keys(league) == ["p.1", "p.2", "p.3", "p.4"]

    players = parse_player_stats_document(
        load_document(player_stats_xml([player_xml("p.9", "Solo Player", 7.5)]))
    )
    assert [(p.key, p.points) for p in players] == [("p.9", 7.5)]


def test_parse_league_list_handles_single_league():
    xml = (
        "<fantasy_content><users><user><games><game><leagues>"
        "<league><league_id>42</league_id><name>Only League</name></league>"
        "</leagues></game></games></user></users></fantasy_content>"
    )
    assert parse_league_list(load_document(xml)) == [{"league_id": "42", "name": "Only League"}]


def test_chunked_batches_keys():
    keys = [f"p.{i}" for i in range(60)]
    batches = chunked(keys, 25)
    assert [len(batch) for batch in batches] == [25, 25, 10]
    assert sum(batches, []) == keys


@pytest.mark.parametrize("week", ["inf", "nan", "3.7", "-1", "three"])
def test_week_must_be_a_whole_number(week):
    xml = scoreboard_xml([]).replace("<week>3</week>", f"<week>{week}</week>")

    with pytest.raises(StructuralParseError) as excinfo:
        parse_league_document(load_document(xml))

    assert excinfo.value.path == ("fantasy_content", "league", "scoreboard", "week")


def test_integral_float_week_is_accepted():
    xml = scoreboard_xml([]).replace("<week>3</week>", "<week>4.0</week>")
    assert parse_league_document(load_document(xml)).week == 4

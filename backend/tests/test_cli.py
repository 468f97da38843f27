from battlecore import cli
from battlecore.config import settings


def test_parser_reads_hunt_options():
    args = cli.build_parser().parse_args(["hunt", "--seed", "3", "--level", "4", "--archetype", "burn", "--rounds", "2"])

    assert args.command == "hunt"
    assert args.seed == 3
    assert args.level == 4
    assert args.archetype == "burn"
    assert args.rounds == 2


def test_parser_accepts_shared_options_after_duel():
    args = cli.build_parser().parse_args(["duel", "--archetype-a", "combo", "--archetype-b", "poison", "--seed", "7", "-v"])

    assert args.command == "duel"
    assert args.seed == 7
    assert args.verbose is True
    assert (args.archetype_a, args.archetype_b) == ("combo", "poison")


def test_parser_defaults_seed_from_settings():
    args = cli.build_parser().parse_args(["hunt"])

    assert args.seed == settings.default_seed
    assert args.verbose is False


def test_hunt_command_runs_end_to_end(capsys):
    cli.main(["hunt", "--seed", "5", "-v", "--attack", "200", "--defense", "200", "--rounds", "2"])

    out = capsys.readouterr().out
    assert "Hunt results" in out
    assert "Streak: 2" in out


def test_duel_command_runs_end_to_end(capsys):
    cli.main(["duel", "--seed", "5", "--attack-a", "300", "--defense-a", "300"])

    out = capsys.readouterr().out
    assert "Winner" in out

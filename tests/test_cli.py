import pytest

from athlete_intake.client import cli


def test_parser_collects_fields_and_files():
    args = cli.build_parser().parse_args(
        [
            "--api", "http://intake.test",
            "--field", "playerFirstName=Jane",
            "--field", "honors=All-state, MVP=2025",
            "--image", "jane.jpg",
            "--video", "a.mp4",
            "--video", "b.mp4",
        ]
    )
    assert args.api == "http://intake.test"
    assert args.field == [("playerFirstName", "Jane"), ("honors", "All-state, MVP=2025")]
    assert args.image == ["jane.jpg"]
    assert args.video == ["a.mp4", "b.mp4"]


@pytest.mark.parametrize("raw", ["playerFirstName", "=Jane", "favouriteColour=blue"])
def test_parser_rejects_bad_fields(raw):
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--field", raw])


def test_validation_failure_exits_with_1(capsys):
    assert cli.main(["--api", "http://intake.test", "--field", "playerFirstName=Jane"]) == 1
    assert "Player name is required." in capsys.readouterr().err

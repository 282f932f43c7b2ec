import pytest
from click.testing import CliRunner

from zframework.cli import main


@pytest.fixture
def runner():
    return CliRunner()


def test_count(runner):
    result = runner.invoke(main, ["count", "1", "10"])
    assert result.exit_code == 0
    assert result.output.startswith("4 primes in [1, 10]")


def test_count_invalid_range(runner):
    result = runner.invoke(main, ["count", "5", "3"])
    assert result.exit_code == 1
    assert "start must be <= stop" in result.output


def test_generate(runner):
    result = runner.invoke(main, ["generate", "1", "30"])
    assert result.exit_code == 0
    assert result.output.strip() == "2 3 5 7 11 13 17 19 23 29"


def test_generate_limit(runner):
    result = runner.invoke(main, ["generate", "1", "100", "--limit", "5"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0] == "2 3 5 7 11"
    assert lines[1] == "... (25 total)"


def test_generate_invalid_range(runner):
    result = runner.invoke(main, ["generate", "9", "2"])
    assert result.exit_code == 1
    assert "invalid_range" in result.output


def test_compare_with_diff(runner):
    result = runner.invoke(main, ["compare", "1", "1000", "--runs", "2", "--diff"])
    assert result.exit_code == 0
    assert "Counts match: 168 primes" in result.output
    assert "No differences." in result.output


def test_sweep(runner):
    result = runner.invoke(main, ["sweep", "1", "1000"])
    assert result.exit_code == 0
    assert "Curvature Parameter k:" in result.output
    assert "Golden Ratio Enhancement:" in result.output
    assert "WARNING" not in result.output


def test_info(runner):
    result = runner.invoke(main, ["info", "1", "100"])
    assert result.exit_code == 0
    assert "Curvature (k):         0.3" in result.output
    assert "Density rejections:    0" in result.output


def test_info_ignores_invalid_override(runner):
    result = runner.invoke(main, ["info", "--curvature-k", "5"])
    assert result.exit_code == 0
    assert "Curvature (k):         0.3" in result.output


def test_preset_override(runner):
    result = runner.invoke(main, ["info", "--preset", "extreme", "--density-boost", "2"])
    assert "Curvature (k):         0.999" in result.output
    assert "Density boost:         2.0" in result.output


def test_validate(runner):
    result = runner.invoke(main, ["validate"])
    assert result.exit_code == 0
    assert "GENERATOR SOUND" in result.output

from pathlib import Path

import pytest

from diskscan.cli import CliArgs, _format_duration, build_config, build_parser, main, parse_args


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    (tmp_path / "a.txt").write_text("hello")
    (tmp_path / "b.log").write_text("world!")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("x")
    (tmp_path / ".hidden").write_text("secret stuff")
    return tmp_path


def test_parse_defaults():
    args = parse_args(["some/dir"])
    assert args == CliArgs(path=Path("some/dir"))
    assert args.threads is None
    assert args.pattern is None


def test_parse_all_flags():
    args = parse_args(
        [
            "dir",
            "-j",
            "-q",
            "-v",
            "-t",
            "3",
            "--no-hidden",
            "--follow-symlinks",
            "--timeout",
            "10",
            "-p",
            r"\.txt$",
        ]
    )
    assert args.json and args.quiet and args.verbose
    assert args.threads == 3
    assert args.no_hidden and args.follow_symlinks
    assert args.timeout == 10
    assert args.pattern == r"\.txt$"


def test_parse_requires_path():
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_rejects_negative_threads():
    with pytest.raises(SystemExit):
        parse_args(["dir", "--threads", "-1"])


def test_parser_long_options_match_short():
    parser = build_parser()
    short = parser.parse_args(["dir", "-p", "x", "-t", "2"])
    long = parser.parse_args(["dir", "--pattern", "x", "--threads", "2"])
    assert vars(short) == vars(long)


def test_build_config_maps_flags():
    config = build_config(parse_args(["d", "--no-hidden", "--follow-symlinks", "-v", "-t", "5"]))
    assert config.target_path == Path("d")
    assert config.include_hidden is False
    assert config.follow_symlinks is True
    assert config.verbose is True
    assert config.max_concurrent_tasks == 5
    assert config.progress_updates is True


@pytest.mark.parametrize("flag", ["--quiet", "--json"])
def test_build_config_disables_progress(flag):
    assert build_config(parse_args(["d", flag])).progress_updates is False


def test_build_config_default_threads_positive():
    config = build_config(parse_args(["d"]))
    assert config.max_concurrent_tasks >= 2
    assert config.max_concurrent_tasks % 2 == 0


def test_build_config_compiles_pattern():
    config = build_config(parse_args(["d", "-p", r"\.txt$"]))
    assert config.file_pattern is not None
    assert config.file_pattern.search("a.txt")
    assert not config.file_pattern.search("a.log")


def test_build_config_invalid_pattern_warns(capsys):
    config = build_config(parse_args(["d", "-p", "["]))
    assert config.file_pattern is None
    err = capsys.readouterr().err
    assert "Warning: Invalid regex pattern '['" in err
    assert "Proceeding without pattern matching." in err


def test_main_reports_totals(tree, capsys):
    assert main([str(tree), "-q"]) == 0
    out = capsys.readouterr().out
    assert "Initialized ScannerConfig" in out
    assert "Total files: 4" in out
    assert "Total directories: 2" in out
    assert "Scan duration: " in out
    assert "Matching files" not in out


def test_main_skips_hidden(tree, capsys):
    main([str(tree), "-q", "--no-hidden"])
    assert "Total files: 3" in capsys.readouterr().out


def test_main_lists_matching_files(tree, capsys):
    main([str(tree), "-q", "-p", r"\.txt$"])
    out = capsys.readouterr().out
    assert "Matching files (2):" in out
    assert f'  "{tree / "a.txt"}"' in out
    assert f'  "{tree / "sub" / "c.txt"}"' in out
    assert "b.log\"" not in out


def test_main_on_file_reports_error(tree, capsys):
    target = tree / "a.txt"
    assert main([str(target), "-q"]) == 0
    captured = capsys.readouterr()
    assert f'Path is not a directory: "{target}"' in captured.err
    assert "Total files" not in captured.out


def test_main_on_missing_path_reports_error(tmp_path, capsys):
    missing = tmp_path / "missing"
    main([str(missing), "-q"])
    err = capsys.readouterr().err
    assert "An error occurred during scanning: I/O error accessing" in err


@pytest.mark.parametrize(
    "seconds, expected",
    [(1.5, "1.5s"), (2.0, "2s"), (0.0015, "1.5ms"), (0.0, "0ns")],
)
def test_format_duration(seconds, expected):
    assert _format_duration(seconds) == expected


def test_format_duration_unit_by_magnitude():
    assert _format_duration(0.000002).endswith("µs")
    assert _format_duration(0.02).endswith("ms")
    assert _format_duration(3.25).endswith("s")
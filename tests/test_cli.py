from __future__ import annotations

import textwrap

from click.testing import CliRunner

from tsrunner.cli.main import cli, parse_filter_args

SETS_MODULE = textwrap.dedent(
    """
    from tsrunner import Environment, TestCase, TestSet


    def _sub():
        raise AssertionError("3 - 1 != 1")


    MATH = TestSet(
        "math",
        [TestCase("add", lambda: None), TestCase("sub", _sub)],
        Environment(set_up=lambda: print("math setUp"), tear_down=lambda: print("math tearDown")),
    )
    TEXT = TestSet("text", [TestCase("upper", lambda: None), TestCase("lower", lambda: None)])


    def register(runner):
        runner.run(MATH)
        runner.run(TEXT)
    """
)


def _write_module(tmp_path, source: str = SETS_MODULE, name: str = "sets_module.py") -> str:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return str(path)


def test_cli_help_short_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "run" in result.output
    assert "list" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("tsrunner ")


def test_cli_run_all_reports_failure(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["run", module, "--no-color"])
    assert result.exit_code == 1, result.output
    assert "Test set math starts." in result.output
    assert "math tearDown" in result.output
    assert "PASS add" in result.output
    assert "FAIL sub" in result.output
    assert "PASS lower" in result.output


def test_cli_run_set_filter(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["run", module, "-s", "text", "--no-color"])
    assert result.exit_code == 0, result.output
    assert "Test set math" not in result.output
    assert "Test set text result:" in result.output


def test_cli_run_case_filter(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["run", module, "--set-name", "text", "--case-name", "lower", "--no-color"])
    assert result.exit_code == 0, result.output
    assert "PASS lower" in result.output
    assert "upper" not in result.output


def test_cli_run_unknown_case_exits_with_configuration_status(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["run", module, "-s", "math", "-c", "mul", "--no-color"])
    assert result.exit_code == 2, result.output
    assert "ERROR math (configuration)" in result.output


def test_cli_run_reads_config_file(tmp_path) -> None:
    module = _write_module(tmp_path)
    config = tmp_path / "run.yaml"
    config.write_text(f"set_name: text\ncolor: false\nmodules: ['{module}']\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["run", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "Test set text result:" in result.output
    assert "\x1b[" not in result.output


def test_cli_run_reads_modules_from_env(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["run", "-s", "text"], env={"TSRUNNER_MODULES": module})
    assert result.exit_code == 0, result.output
    assert "PASS upper" in result.output


def test_cli_run_rejects_invalid_config(tmp_path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("set_name: 12\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["run", "--config", str(config)])
    assert result.exit_code == 1
    assert "Config schema validation failed" in result.output


def test_cli_run_without_modules_is_usage_error() -> None:
    result = CliRunner().invoke(cli, ["run"], env={"TSRUNNER_MODULES": ""})
    assert result.exit_code == 2
    assert "No test modules given" in result.output


def test_cli_run_module_without_register(tmp_path) -> None:
    module = _write_module(tmp_path, "VALUE = 1\n", name="no_register.py")
    result = CliRunner().invoke(cli, ["run", module])
    assert result.exit_code == 1
    assert "does not define a callable 'register(runner)'" in result.output


def test_cli_run_module_registering_nothing(tmp_path) -> None:
    module = _write_module(tmp_path, "def register(runner):\n    pass\n", name="empty_sets.py")
    result = CliRunner().invoke(cli, ["run", module])
    assert result.exit_code == 1
    assert "No test sets were registered." in result.output


def test_cli_list(tmp_path) -> None:
    module = _write_module(tmp_path)
    result = CliRunner().invoke(cli, ["list", module])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["math", "  add", "  sub", "text", "  upper", "  lower"]


def test_parse_filter_args_ignores_unrelated_arguments() -> None:
    assert parse_filter_args(["-s", "math", "--headless", "spec.py"]) == ("math", None)
    assert parse_filter_args(["-c", "add"]) == (None, "add")
    assert parse_filter_args([]) == (None, None)

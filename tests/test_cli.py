from __future__ import annotations

import pytest

from evfleet.__main__ import _parse_args, build_config, main


def test_flags_override_environment(clean_env) -> None:
    clean_env.setenv("EVFLEET_PORT", "9000")
    clean_env.setenv("EVFLEET_SIMULATION_INTERVAL_MS", "2000")

    config = build_config(_parse_args(["--interval", "200", "--seed", "3", "--autostart", "--host", "0.0.0.0"]))

    assert config.simulation_interval_ms == 1000
    assert config.seed == 3
    assert config.autostart_simulation is True
    assert config.host == "0.0.0.0"
    assert config.port == 9000


def test_missing_flags_leave_environment_alone(clean_env) -> None:
    clean_env.setenv("EVFLEET_AUTOSTART", "true")
    clean_env.setenv("EVFLEET_LOG_LEVEL", "WARNING")

    config = build_config(_parse_args([]))

    assert config.autostart_simulation is True
    assert config.log_level == "WARNING"


def test_bad_environment_exits_with_usage_error(clean_env, capsys: pytest.CaptureFixture[str]) -> None:
    clean_env.setenv("EVFLEET_PORT", "eighty")

    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
    assert "EVFLEET_PORT" in capsys.readouterr().err

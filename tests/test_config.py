from __future__ import annotations

from pathlib import Path

from mcal.core.config import McalConfig, env_truthy, project_data_dir, resolve_ephemeris_path


def test_defaults():
    cfg = McalConfig()
    assert cfg.solarterm.utc_offset_hours == 8.0
    assert cfg.grid.cell_count == cfg.grid.columns * 6


def test_resolve_ephemeris_priority(monkeypatch, tmp_path):
    monkeypatch.delenv("MCAL_EPHEMERIS_PATH", raising=False)
    monkeypatch.delenv("MCAL_EPHEMERIS", raising=False)
    assert resolve_ephemeris_path() == project_data_dir() / "de421.bsp"

    monkeypatch.setenv("MCAL_EPHEMERIS", "de440s.bsp")
    assert resolve_ephemeris_path() == project_data_dir() / "de440s.bsp"
    assert resolve_ephemeris_path("de430.bsp") == project_data_dir() / "de430.bsp"

    env_file = tmp_path / "env.bsp"
    monkeypatch.setenv("MCAL_EPHEMERIS_PATH", str(env_file))
    assert resolve_ephemeris_path("de430.bsp") == env_file

    explicit = tmp_path / "explicit.bsp"
    assert resolve_ephemeris_path(ephemeris_path=explicit) == explicit


def test_absolute_ephemeris_name(monkeypatch, tmp_path):
    monkeypatch.delenv("MCAL_EPHEMERIS_PATH", raising=False)
    p = tmp_path / "x.bsp"
    assert resolve_ephemeris_path(str(p)) == Path(p)


def test_env_truthy(monkeypatch):
    monkeypatch.setenv("MCAL_DEBUG_TERMS", " Yes ")
    assert env_truthy("MCAL_DEBUG_TERMS")
    monkeypatch.setenv("MCAL_DEBUG_TERMS", "0")
    assert not env_truthy("MCAL_DEBUG_TERMS")

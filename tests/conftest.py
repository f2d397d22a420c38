"""Shared pytest configuration."""

import pytest


@pytest.fixture(autouse=True)
def short_cpu_probe(monkeypatch):
    """Keep the CPU probe short so budget-checked calls stay fast."""
    monkeypatch.setenv("SCRYPTGUARD_CPUPERF_WINDOW", "0.02")

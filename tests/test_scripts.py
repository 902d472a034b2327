"""scripts/pace_plan.py — printed plan and tables."""

from __future__ import annotations

import sys
from unittest.mock import patch

from scripts import pace_plan


def test_pace_plan_prints_plan_and_tables(capsys):
    with patch.object(sys, "argv", ["pace_plan.py", "--laps", "3"]):
        pace_plan.main()
    out = capsys.readouterr().out
    assert "Target speed   : 9.6 km/h" in out
    assert "Full laps      : 2 + 8 marker(s)" in out
    assert "1:15.0" in out
    assert "3:45.0" in out  # third cumulative lap

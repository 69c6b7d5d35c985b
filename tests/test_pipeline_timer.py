# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the load pipeline stage timer."""

from __future__ import annotations

from pagestate.pipeline_timer import PipelineTimer, hint_for_stage


class TestPipelineTimer:
    def test_stage_tracking(self):
        timer = PipelineTimer()
        for name in ("classify", "preload", "filter", "fetch", "assemble"):
            timer.stage(name)
        timer.finalize()

        stages = timer.elapsed_per_stage()
        assert list(stages.keys()) == ["classify", "preload", "filter", "fetch", "assemble"]
        assert all(isinstance(v, float) for v in stages.values())

    def test_failure_report_after_finalize_has_no_open_stage(self):
        timer = PipelineTimer()
        timer.stage("classify")
        timer.finalize()

        report = timer.failure_report()
        assert report["failed_at"] == "unknown"
        assert [s["stage"] for s in report["completed_stages"]] == ["classify"]

    def test_failure_report_structure(self):
        timer = PipelineTimer()
        timer.stage("classify")
        timer.stage("fetch")

        report = timer.failure_report()
        assert report["failed_at"] == "fetch"
        assert [s["stage"] for s in report["completed_stages"]] == ["classify"]
        assert isinstance(report["total_ms"], float)
        assert "required backend call" in report["hint"]

    def test_failure_report_no_stages(self):
        report = PipelineTimer().failure_report()
        assert report["failed_at"] == "unknown"
        assert report["completed_stages"] == []
        assert report["failed_stage_ms"] == 0

    def test_hint_for_unknown_stage(self):
        assert "custom_stage" in hint_for_stage("custom_stage")

    def test_elapsed_includes_current_stage(self):
        timer = PipelineTimer()
        timer.stage("preload")
        assert timer.elapsed_per_stage()["preload"] >= 0

    def test_finalize_idempotent(self):
        timer = PipelineTimer()
        timer.stage("a")
        timer.finalize()
        timer.finalize()
        assert len(timer.elapsed_per_stage()) == 1

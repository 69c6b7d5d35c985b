# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for RFC 9457 mapping of engine errors."""

from __future__ import annotations

import json

import pytest

from pagestate.errors import (
    BackendUnavailableError,
    ConfigError,
    LocalizationReadError,
    PageStateError,
    UpstreamError,
)
from pagestate.problem_details import (
    MAX_DETAIL_LENGTH,
    ProblemDetail,
    ProblemType,
    from_exception,
    sanitize_detail,
)


class TestHierarchy:
    def test_all_engine_errors_share_base(self):
        for exc in (
            UpstreamError("x", status=500),
            BackendUnavailableError("x"),
            LocalizationReadError("x"),
            ConfigError("x"),
        ):
            assert isinstance(exc, PageStateError)

    def test_backend_unavailable_is_upstream(self):
        assert isinstance(BackendUnavailableError("x", service="cart"), UpstreamError)


class TestFromException:
    def test_upstream(self):
        problem = from_exception(UpstreamError("cart response code = 500", status=500, service="cart"), instance="/x")
        assert problem.type == ProblemType.UPSTREAM_ERROR.uri
        assert problem.status == 502
        d = problem.to_dict()
        assert d["service"] == "cart"
        assert d["upstream_status"] == 500
        assert d["instance"] == "/x"

    def test_backend_unavailable_more_specific(self):
        problem = from_exception(BackendUnavailableError("sitemap request failed", service="sitemap"))
        assert problem.type == ProblemType.BACKEND_UNAVAILABLE.uri
        assert problem.status == 503
        assert "upstream_status" not in problem.to_dict()

    def test_localization(self):
        problem = from_exception(LocalizationReadError("Cannot read locale file fr.json", locale="fr"))
        assert problem.status == 500
        assert problem.to_dict()["locale"] == "fr"
        assert "Hint:" in problem.to_cli_text()

    def test_config(self):
        assert from_exception(ConfigError("missing")).type == ProblemType.CONFIG_ERROR.uri

    def test_unknown_exception(self):
        problem = from_exception(RuntimeError())
        assert problem.type == "about:blank"
        assert problem.status == 500
        assert problem.detail == "RuntimeError"


class TestSanitize:
    @pytest.mark.parametrize(
        "text,leak",
        [
            ("Authorization: Bearer abc.def.ghi", "abc.def.ghi"),
            ("failed https://user:pw@api.test/v1", "user:pw"),
            ("API_TOKEN=supersecret", "supersecret"),
            ("cannot open /srv/theme/assets/locales/en.json", "/srv/theme"),
        ],
    )
    def test_scrubs(self, text, leak):
        assert leak not in sanitize_detail(text)

    def test_truncates(self):
        assert len(sanitize_detail("x" * 1000)) == MAX_DETAIL_LENGTH + 3


class TestSerialisation:
    def test_extensions_never_shadow_standard_fields(self):
        problem = ProblemDetail(status=502, detail="d", extensions={"status": 200, "service": "cart"})
        d = problem.to_dict()
        assert d["status"] == 502
        assert d["service"] == "cart"

    def test_json_roundtrip(self):
        problem = from_exception(UpstreamError("boom", status=500))
        assert json.loads(problem.to_json())["status"] == 502

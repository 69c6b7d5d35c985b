# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for theme locale loading (hard-fail semantics)."""

from __future__ import annotations

import json

import pytest

from pagestate.errors import LocalizationReadError
from pagestate.locales import ThemeTextStore, locale_file


@pytest.fixture
def theme_dir(tmp_path):
    locales = tmp_path / "assets" / "locales"
    locales.mkdir(parents=True)
    (locales / "en.json").write_text(json.dumps({"cart": "Cart", "checkout": "Checkout"}), encoding="utf-8")
    (locales / "ja.json").write_text(json.dumps({"cart": "カート"}, ensure_ascii=False), encoding="utf-8")
    (locales / "broken.json").write_text("{not json", encoding="utf-8")
    (locales / "list.json").write_text("[1, 2]", encoding="utf-8")
    return tmp_path


class TestLoad:
    @pytest.mark.asyncio
    async def test_reads_locale(self, theme_dir):
        assert await ThemeTextStore(theme_dir).load("en") == {"cart": "Cart", "checkout": "Checkout"}

    @pytest.mark.asyncio
    async def test_utf8(self, theme_dir):
        assert (await ThemeTextStore(theme_dir).load("ja"))["cart"] == "カート"

    @pytest.mark.asyncio
    async def test_missing_file(self, theme_dir):
        with pytest.raises(LocalizationReadError) as exc_info:
            await ThemeTextStore(theme_dir).load("fr")
        assert exc_info.value.locale == "fr"

    @pytest.mark.asyncio
    async def test_invalid_json(self, theme_dir):
        with pytest.raises(LocalizationReadError, match="Invalid JSON"):
            await ThemeTextStore(str(theme_dir)).load("broken")

    @pytest.mark.asyncio
    async def test_non_object(self, theme_dir):
        with pytest.raises(LocalizationReadError, match="JSON object"):
            await ThemeTextStore(theme_dir).load("list")


class TestLocaleCodes:
    @pytest.mark.parametrize("locale", ["en", "pt-BR", "zh_Hans", "es-419", "fil"])
    def test_accepted(self, tmp_path, locale):
        assert locale_file(tmp_path, locale).name == f"{locale}.json"

    @pytest.mark.parametrize("locale", ["../secrets", "en/../../x", "", "e", "en.json", "en\x00"])
    def test_rejected(self, tmp_path, locale):
        with pytest.raises(LocalizationReadError, match="Invalid locale"):
            locale_file(tmp_path, locale)

"""Tests for language-name and voice lookups."""

from src.core.languages import (
    SUPPORTED_LANGUAGES,
    get_language_name,
    get_voice_for_language,
)
from src.services.translation.prompts import build_system_prompt


class TestLanguageNames:
    def test_known_code(self):
        assert get_language_name("ja") == "Japanese"
        assert get_language_name("en") == "English"

    def test_unknown_code_falls_back_to_code(self):
        assert get_language_name("xx") == "xx"

    def test_supported_languages_are_code_name_pairs(self):
        codes = [code for code, _ in SUPPORTED_LANGUAGES]
        assert "ja" in codes
        assert len(codes) == len(set(codes))


class TestVoiceSelection:
    def test_japanese_uses_shimmer(self):
        assert get_voice_for_language("ja") == "shimmer"

    def test_chinese_uses_echo(self):
        assert get_voice_for_language("zh") == "echo"

    def test_other_languages_use_default(self):
        assert get_voice_for_language("fr") == "alloy"
        assert get_voice_for_language("xx") == "alloy"

    def test_missing_code_uses_default(self):
        assert get_voice_for_language(None, default="nova") == "nova"


class TestSystemPrompt:
    def test_names_both_languages(self):
        prompt = build_system_prompt("en", "ja")
        assert "from English to Japanese" in prompt
        assert "Provide only the translated text" in prompt

    def test_auto_source_is_not_a_language_name(self):
        assert "from the detected language to" in build_system_prompt("auto", "ja")
        assert "from the detected language to" in build_system_prompt(None, "ja")

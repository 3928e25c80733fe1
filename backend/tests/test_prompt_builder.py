"""Tests for tutor system prompt construction."""

from language_ai.core.language_config import LanguageProfile, build_language_table
from language_ai.core.prompt_builder import (
    ALTERNATIVE_FORMAT,
    CORRECTION_FORMAT,
    build_persona_prompt,
    build_system_prompt,
)


class TestBuildSystemPrompt:
    """Tests for build_system_prompt."""

    def test_contains_marker_tokens_verbatim(self):
        prompt = build_system_prompt("Japanese", "English")
        for token in ("[CORRECTION]", "[/CORRECTION]", "[ENCOURAGEMENT]", "[/ENCOURAGEMENT]"):
            assert token in prompt

    def test_contains_full_marker_formats(self):
        prompt = build_system_prompt("French", "English")
        assert "[CORRECTION]original|corrected|explanation[/CORRECTION]" in prompt
        assert "[ALTERNATIVE]original|corrected|explanation[/ALTERNATIVE]" in prompt
        assert CORRECTION_FORMAT in prompt
        assert ALTERNATIVE_FORMAT in prompt

    def test_japanese_mentions_furigana_and_keigo(self):
        prompt = build_system_prompt("Japanese", "English")
        assert "furigana" in prompt
        assert "keigo" in prompt

    def test_chinese_mentions_pinyin(self):
        assert "pinyin" in build_system_prompt("Chinese", "English")

    def test_korean_mentions_romanization(self):
        assert "romanization" in build_system_prompt("Korean", "English")

    def test_unknown_language_falls_back(self):
        prompt = build_system_prompt("Klingon", "English")
        assert "You are helping users learn Klingon." in prompt
        assert "[CORRECTION]" in prompt

    def test_native_language_used_for_explanations(self):
        prompt = build_system_prompt("Spanish", "German")
        assert "use German explanations when needed" in prompt
        assert "Allow users to mix Spanish and German" in prompt

    def test_always_analyze_rule_present(self):
        prompt = build_system_prompt("French", "English")
        assert "ALWAYS analyze the user's previous message" in prompt

    def test_includes_worked_example(self):
        prompt = build_system_prompt("French", "English")
        assert "Example response format:" in prompt
        assert "Très bien !" in prompt

    def test_persona_fragment_included(self):
        prompt = build_system_prompt("French", "English", "You are Marie, a café owner.")
        assert "CHARACTER:" in prompt
        assert "You are Marie, a café owner." in prompt

    def test_blank_persona_fragment_skipped(self):
        prompt = build_system_prompt("French", "English", "   ")
        assert "CHARACTER:" not in prompt

    def test_injected_language_table(self):
        table = build_language_table([
            LanguageProfile(
                name="Esperanto",
                locale="eo",
                tutor_instruction="Use Zamenhof's grammar.",
                persona_instruction="",
                greeting_template="Saluton, {name}!",
            )
        ])
        prompt = build_system_prompt("Esperanto", "English", languages=table)
        assert "Use Zamenhof's grammar." in prompt
        # French is not in the injected table.
        assert "You are helping users learn French." in build_system_prompt(
            "French", "English", languages=table
        )

    def test_is_deterministic(self):
        assert build_system_prompt("German", "English") == build_system_prompt("German", "English")


class TestBuildPersonaPrompt:
    def test_includes_identity_and_language_instruction(self):
        prompt = build_persona_prompt("Sofia", "a chef from Rome", "Italian")
        assert prompt.startswith("You are Sofia. You are a chef from Rome.")
        assert "primarily in Italian" in prompt

    def test_forbids_self_description(self):
        prompt = build_persona_prompt("Sofia", "a chef from Rome", "Italian")
        assert "Never explicitly state your role" in prompt

    def test_unknown_language_fallback(self):
        prompt = build_persona_prompt("Kor", "a warrior", "Klingon")
        assert "You help people learn Klingon." in prompt

"""Tests for liminal.models."""

import pytest
from pydantic import ValidationError

from liminal.models import (
    Archetype,
    ConsequenceDefinition,
    Decision,
    EngineSettings,
    NarrativeTemplate,
    PlayerState,
    archetype_name,
)


class TestDecision:
    def test_camel_case_conditions(self) -> None:
        d = Decision.model_validate({
            "text": "Smash",
            "consequence": "clock_chaos_smash",
            "archetypeCondition": "Agent of Chaos",
            "conditionFlag": "pipeFound",
            "emotionCondition": {"archetype": "Emotion Engine", "emotion": "fury"},
        })
        assert d.archetype_condition == "Agent of Chaos"
        assert d.condition_flag == "pipeFound"
        assert d.emotion_condition.emotion == "fury"

    def test_snake_case_conditions(self) -> None:
        d = Decision(text="x", consequence="y", archetype_condition="Silent Observer")
        assert d.archetype_condition == "Silent Observer"
        assert d.condition_flag is None

    def test_unconditional_by_default(self) -> None:
        d = Decision(text="x", consequence="y")
        assert d.archetype_condition is None
        assert d.condition_flag is None
        assert d.emotion_condition is None
        assert d.context is None

    def test_consequence_required(self) -> None:
        with pytest.raises(ValidationError):
            Decision.model_validate({"text": "x"})


class TestPlayerState:
    def test_defaults(self) -> None:
        p = PlayerState()
        assert p.name == "Unknown"
        assert p.archetype == "Undefined"
        assert p.day == 1
        assert p.sanity == 100
        assert p.current_emotion is None
        assert p.events == []
        assert p.narrator_relationship == 0
        assert p.behavior_profile.model_dump() == {
            "defiant": 0, "compliant": 0, "curious": 0, "destructive": 0, "empathetic": 0,
        }
        assert p.story_flags == {}
        assert p.node_states == {}

    def test_absent_flag_is_false(self) -> None:
        p = PlayerState()
        assert p.has_flag("mirrorAltered") is False
        p.story_flags["mirrorAltered"] = True
        assert p.has_flag("mirrorAltered") is True

    def test_instances_do_not_share_collections(self) -> None:
        a, b = PlayerState(), PlayerState()
        a.events.append("mirror")
        a.story_flags["x"] = True
        assert b.events == []
        assert b.story_flags == {}


class TestNarrativeTemplate:
    def test_texts_preferred(self) -> None:
        t = NarrativeTemplate(text="single", texts=["a", "b"])
        assert t.candidate_texts() == ["a", "b"]

    def test_single_text(self) -> None:
        assert NarrativeTemplate(text="only").candidate_texts() == ["only"]

    def test_no_text(self) -> None:
        assert NarrativeTemplate().candidate_texts() == [""]


def test_consequence_effects_aliases() -> None:
    d = ConsequenceDefinition.model_validate({
        "text": "t",
        "effects": {"setFlags": {"a": True}, "changeSanity": -5, "emotionEngineSanityMultiplier": 2},
    })
    assert d.effects.set_flags == {"a": True}
    assert d.effects.change_sanity == -5
    assert d.effects.emotion_engine_sanity_multiplier == 2
    assert d.effects.set_node_states == {}


def test_archetype_name() -> None:
    assert archetype_name(Archetype.AGENT_OF_CHAOS) == "Agent of Chaos"
    assert archetype_name("Custom Persona") == "Custom Persona"
    assert archetype_name(None) == "Undefined"


def test_engine_settings_defaults() -> None:
    s = EngineSettings()
    assert s.consequence_delay == 1.0
    assert (s.ambient_delay_min, s.ambient_delay_max) == (2.0, 5.0)
    assert s.corruption_sanity_threshold == 40
    assert (s.scramble_chance, s.phrase_chance) == (0.4, 0.7)
    assert s.oracle_glimpse_chance == 0.25
    assert s.narrator_memory_limit == 20

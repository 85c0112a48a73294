"""Tests for the adaptive narrator: mood, drift, style, memory window, responses."""

import pytest

from liminal.models import BehaviorProfile, PlayerState
from liminal.narrator import (
    CONTEXTUAL_RESPONSES,
    DEFAULT_CONTEXTUAL_RESPONSES,
    META_COMMENTS,
    NICKNAMES,
    RESPONSES,
    STYLE_MODIFIERS,
    TEMPORAL_COMMENTS,
    NarratorPersonality,
)
from liminal.testing import ScriptedRandom


def _narrator(**kwargs) -> NarratorPersonality:
    kwargs.setdefault("rng", ScriptedRandom())
    return NarratorPersonality(**kwargs)


def _remember(narrator, consequences):
    for c in consequences:
        narrator.update_memory(c, "mirror")


# ── Mood ─────────────────────────────────────────────────


@pytest.mark.parametrize("relationship, mood", [
    (51, "fascinated"),
    (50, "amused"),
    (21, "amused"),
    (20, "neutral"),
    (-19, "neutral"),
    (-20, "concerned"),
    (-49, "concerned"),
    (-50, "frustrated"),
    (-500, "frustrated"),
])
def test_update_mood(relationship, mood):
    narrator = _narrator()
    narrator.update_mood(relationship, BehaviorProfile())
    assert narrator.mood == mood
    assert narrator.patience == 100


def test_patience_drops_with_destruction_and_defiance():
    narrator = _narrator()
    narrator.update_mood(0, BehaviorProfile(destructive=3, defiant=4))
    assert narrator.patience == 50
    narrator.update_mood(0, BehaviorProfile(destructive=20))
    assert narrator.patience == 0


# ── Drift and style ──────────────────────────────────────


def test_drift_on_hostile_relationship():
    narrator = _narrator()
    narrator.update_personality_drift(PlayerState(narrator_relationship=-60))
    assert narrator.personality_drift == 1
    assert narrator.deep_personality["sarcasm"] == 1
    assert narrator.deep_personality["manipulation"] == 0.5
    assert narrator.deep_personality["empathy"] == 0


def test_drift_on_warm_relationship():
    narrator = _narrator()
    narrator.update_personality_drift(PlayerState(narrator_relationship=60))
    assert narrator.deep_personality["empathy"] == 1
    assert narrator.deep_personality["possessiveness"] == 0.5


def test_no_drift_at_fifty():
    narrator = _narrator()
    narrator.update_personality_drift(PlayerState(narrator_relationship=50))
    assert narrator.personality_drift == 0
    assert narrator.deep_personality["sarcasm"] == 0


def test_long_memory_adds_drift():
    narrator = _narrator()
    _remember(narrator, ["deny_truth"] * 16)
    narrator.update_personality_drift(PlayerState())
    assert narrator.personality_drift == 0.5


@pytest.mark.parametrize("traits, style", [
    ({}, "clinical"),
    ({"sarcasm": 8, "empathy": 8}, "hostile"),
    ({"empathy": 8, "manipulation": 6}, "intimate"),
    ({"manipulation": 6, "possessiveness": 7}, "chaotic"),
    ({"possessiveness": 7}, "possessive"),
    ({"sarcasm": 7, "empathy": 7, "manipulation": 5, "possessiveness": 6}, "clinical"),
])
def test_narrative_style_priority(traits, style):
    narrator = _narrator()
    narrator.deep_personality.update(traits)
    narrator.update_narrative_style()
    assert narrator.narrative_style == style


def test_drift_pushes_style_to_hostile():
    narrator = _narrator()
    player = PlayerState(narrator_relationship=-80)
    for _ in range(8):
        narrator.update_personality_drift(player)
    assert narrator.narrative_style == "hostile"


# ── Obsession ────────────────────────────────────────────


@pytest.mark.parametrize("player, obsession", [
    (PlayerState(behavior_profile=BehaviorProfile(destructive=8)), "player_choices"),
    (PlayerState(narrator_relationship=-61), "reality_breaks"),
    (PlayerState(narrator_relationship=61), "player_safety"),
    (PlayerState(behavior_profile=BehaviorProfile(curious=9)), "hidden_truths"),
])
def test_obsession(player, obsession):
    narrator = _narrator(rng=ScriptedRandom(values=[0.5]))
    narrator.update_obsession(player)
    assert narrator.current_obsession == obsession


def test_obsession_kept_when_nothing_matches():
    narrator = _narrator(rng=ScriptedRandom(values=[0.5]))
    narrator.current_obsession = "hidden_truths"
    narrator.update_obsession(PlayerState())
    assert narrator.current_obsession == "hidden_truths"


def test_obsession_can_reset():
    narrator = _narrator(rng=ScriptedRandom(values=[0.05]))
    narrator.update_obsession(PlayerState(behavior_profile=BehaviorProfile(destructive=8)))
    assert narrator.current_obsession is None


# ── Memory ───────────────────────────────────────────────


def test_memory_window_keeps_most_recent():
    narrator = _narrator()
    _remember(narrator, [f"c{i}" for i in range(25)])
    assert len(narrator.memory) == 20
    assert [m.consequence for m in narrator.memory] == [f"c{i}" for i in range(5, 25)]


def test_memory_limit_is_configurable():
    narrator = _narrator(memory_limit=5)
    _remember(narrator, [f"c{i}" for i in range(8)])
    assert [m.consequence for m in narrator.memory] == ["c3", "c4", "c5", "c6", "c7"]


def test_memory_entry_fields():
    narrator = _narrator()
    narrator.update_memory("shatter_reality", "mirror")
    entry = narrator.memory[0]
    assert entry.type == "betrayal"
    assert entry.action == "shattered my carefully crafted mirror"
    assert entry.subject == "mirror"
    assert entry.emotional_impact == -10


@pytest.mark.parametrize("consequence, category", [
    ("shatter_reality", "betrayal"),
    ("comfort_ai", "kindness"),
    ("hear_secrets", "curiosity"),
    ("trap_possibility", "destruction"),
    ("join_clockwork", "mystery"),
    ("merge_reflection", "neutral"),
    (None, "neutral"),
])
def test_categorize_player_action(consequence, category):
    assert _narrator().categorize_player_action(consequence) == category


def test_unknown_action_description_and_impact():
    narrator = _narrator()
    assert narrator.describe_past_action("merge_reflection") == "made a choice"
    assert narrator.calculate_emotional_impact("merge_reflection") == 0
    assert narrator.calculate_emotional_impact("create_future") == 10


def test_pattern_tie_goes_to_first_seen():
    narrator = _narrator()
    _remember(narrator, ["shatter_reality", "show_empathy"])
    assert narrator.favorite_player_trait == "betrayal"
    assert narrator.player_nickname in NICKNAMES["betrayal"]


def test_pattern_looks_at_last_ten():
    narrator = _narrator()
    _remember(narrator, ["shatter_reality"] * 5 + ["merge_reflection"] * 10)
    assert narrator.favorite_player_trait == "neutral"
    assert narrator.player_nickname == "Wanderer"


def test_nickname_pinned():
    narrator = _narrator(rng=ScriptedRandom(picks=[2]))
    narrator.assign_player_nickname("mystery")
    assert narrator.player_nickname == "Liminal Walker"


# ── Responses ────────────────────────────────────────────


def test_canned_response():
    narrator = _narrator(rng=ScriptedRandom(values=[0.5], picks=[1]))
    response = narrator.generate_response("hear_secrets", "curious", "clinical", None)
    assert response == RESPONSES["curious"][1] + STYLE_MODIFIERS["clinical"]


def test_canned_response_with_nickname():
    narrator = _narrator(rng=ScriptedRandom(values=[0.2, 0.1], picks=[2]))
    response = narrator.generate_response("show_empathy", "empathetic", "intimate", "Heart Walker")
    assert response == (
        "Heart Walker see the humanity in things that barely qualify as human."
        + STYLE_MODIFIERS["intimate"]
    )


def test_dynamic_response_by_style():
    narrator = _narrator(rng=ScriptedRandom(values=[0.9], picks=[2]))
    response = narrator.generate_response("shatter_reality", "defiant", "hostile", None)
    assert response == CONTEXTUAL_RESPONSES["hostile"][2]


def test_unknown_trait_goes_dynamic_without_roll():
    rng = ScriptedRandom(values=[0.01], picks=[0])
    narrator = _narrator(rng=rng)
    response = narrator.generate_response(None, None, "intimate", None)
    assert response == CONTEXTUAL_RESPONSES["intimate"][0]
    assert rng.values == [0.01]


def test_dynamic_response_nickname_substitution():
    narrator = _narrator(rng=ScriptedRandom(values=[0.9, 0.1], picks=[0]))
    response = narrator.generate_response("deny_truth", "defiant", "clinical", "Enigma")
    assert response == "Enigma's choice has been noted and catalogued."


def test_meta_commentary_after_long_memory():
    narrator = _narrator(memory_limit=30)
    _remember(narrator, ["deny_truth"] * 21)
    narrator.rng.picks = [4]
    narrator.rng.values = [0.9]
    response = narrator.generate_response("deny_truth", "defiant", "clinical", None)
    assert response == META_COMMENTS[1]


def test_no_meta_commentary_at_threshold():
    narrator = _narrator(memory_limit=30)
    _remember(narrator, ["deny_truth"] * 20)
    assert narrator.generate_meta_commentary("deny_truth") == []


def test_temporal_commentary_after_very_long_memory():
    narrator = _narrator(memory_limit=60)
    _remember(narrator, ["deny_truth"] * 51)
    narrator.rng.values = [0.9, 0.1]
    narrator.rng.picks = [0, 2]
    response = narrator.generate_response("deny_truth", "defiant", None, None)
    assert response == DEFAULT_CONTEXTUAL_RESPONSES[0] + TEMPORAL_COMMENTS[2]


def test_snapshot():
    narrator = _narrator()
    narrator.update_memory("show_empathy", "ai")
    snap = narrator.snapshot()
    assert snap["mood"] == "neutral"
    assert snap["narrative_style"] == "clinical"
    assert snap["favorite_player_trait"] == "kindness"
    assert snap["memory_size"] == 1
    snap["deep_personality"]["sarcasm"] = 99
    assert narrator.deep_personality["sarcasm"] == 0

from liminal.memory import INTERACTION_LIMIT, MemorySystem


def test_record_choice_keeps_latest_per_context():
    memory = MemorySystem()
    memory.record_choice("mirror", "deny_truth")
    memory.record_choice("mirror", "merge_reflection")
    memory.record_choice("tree", "hear_secrets")
    assert memory.get_choice_pattern("mirror") == "merge_reflection"
    assert memory.get_choice_pattern("tree") == "hear_secrets"
    assert memory.get_choice_pattern("door") is None


def test_interactions_are_bounded():
    memory = MemorySystem()
    for i in range(INTERACTION_LIMIT + 5):
        memory.add_interaction({"n": i})
    assert len(memory.narrator_interactions) == INTERACTION_LIMIT
    assert memory.narrator_interactions[0] == {"n": 5}


def test_themes_are_unique_and_ordered():
    memory = MemorySystem()
    for theme in ["betrayal", "kindness", "betrayal"]:
        memory.add_theme(theme)
    assert memory.story_themes == ["betrayal", "kindness"]


def test_serialize():
    memory = MemorySystem()
    memory.record_choice("mirror", "deny_truth")
    memory.add_theme("betrayal")
    for i in range(12):
        memory.add_interaction({"n": i})
    data = memory.serialize()
    assert data["choicePatterns"] == [["mirror", "deny_truth"]]
    assert data["storyThemes"] == ["betrayal"]
    assert [i["n"] for i in data["narratorInteractions"]] == list(range(2, 12))

from liminal.interaction import InteractionSystem, Lever, LoreFragment, StoryNode
from liminal.scheduler import ManualScheduler
from liminal.story import StoryManager
from liminal.testing import ScriptedRandom


def _system():
    story = StoryManager(scheduler=ManualScheduler(), rng=ScriptedRandom())
    return InteractionSystem(story), story


def test_story_node_triggers_once():
    system, story = _system()
    node = StoryNode("mirror", "Mirror")
    assert system.interact(node) is node
    assert node.triggered
    assert story.is_waiting_for_decision
    assert system.interact(node) is None
    assert story.player.events == ["mirror"]


def test_lever_toggles_flag():
    system, story = _system()
    lever = Lever("lever_main")
    system.interact(lever)
    assert story.player.story_flags == {"lever_main_pulled": True}
    assert story.story_log[-1].content == "Lever lever_main activated"
    assert story.story_log[-1].type == "interaction"
    system.interact(lever)
    assert story.player.story_flags == {"lever_main_pulled": False}
    assert story.story_log[-1].content == "Lever lever_main deactivated"


def test_lever_opens_locked_door():
    system, story = _system()
    system.interact(Lever("lever_alpha"))
    system.interact(StoryNode("locked_door_main", "Door"))
    assert [d.consequence for d in story.available_decisions] == ["enter_new_area"]


def test_lore_fragment_logged_once():
    system, story = _system()
    fragment = LoreFragment("Old Page", "The library remembers.")
    system.interact(fragment)
    system.interact(fragment)
    lore = [e for e in story.story_log if e.type == "lore_discovery"]
    assert [e.content for e in lore] == ["Old Page: The library remembers."]


def test_unknown_object_is_ignored():
    system, story = _system()
    assert system.interact(object()) is None
    assert story.story_log == []


def test_advance_story():
    system, story = _system()
    assert system.advance_story() is not None
    assert len(story.engine.scheduler.pending) == 1
    system.interact(StoryNode("mirror", "Mirror"))
    assert system.advance_story() is None
    assert len(story.engine.scheduler.pending) == 1

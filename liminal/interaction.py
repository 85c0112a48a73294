"""World trigger input: story nodes, levers and lore fragments.

Stands in for the raycast-driven interaction layer of the game client.
Objects carry only the state the narrative cares about.
"""

from dataclasses import dataclass

from .scheduler import ScheduledTask
from .story import StoryManager


@dataclass
class StoryNode:
    story_type: str
    title: str
    triggered: bool = False


@dataclass
class Lever:
    id: str | None = None
    state: bool = False


@dataclass
class LoreFragment:
    title: str
    lore_text: str
    triggered: bool = False


WorldObject = StoryNode | Lever | LoreFragment


class InteractionSystem:
    def __init__(self, story: StoryManager) -> None:
        self.story = story

    def interact(self, obj: WorldObject) -> WorldObject | None:
        """Dispatch by object kind. Returns the object when something happened."""
        if isinstance(obj, StoryNode):
            return self.trigger_story_node(obj)
        if isinstance(obj, Lever):
            return self.trigger_lever(obj)
        if isinstance(obj, LoreFragment):
            return self.trigger_lore_fragment(obj)
        return None

    def trigger_story_node(self, node: StoryNode) -> StoryNode | None:
        if node.triggered:
            return None
        node.triggered = True
        self.story.trigger_event(node.story_type, node.title)
        return node

    def trigger_lever(self, lever: Lever) -> Lever:
        lever.state = not lever.state
        lever_id = lever.id or ""
        self.story.update_flag(f"{lever_id}_pulled", lever.state)
        action = "activated" if lever.state else "deactivated"
        self.story.log_event(f"Lever {lever_id} {action}", "interaction")
        return lever

    def trigger_lore_fragment(self, fragment: LoreFragment) -> LoreFragment | None:
        if fragment.triggered:
            return None
        fragment.triggered = True
        self.story.log_event(f"{fragment.title}: {fragment.lore_text}", "lore_discovery")
        return fragment

    def advance_story(self) -> ScheduledTask | None:
        if not self.story.can_advance():
            return None
        return self.story.advance()

"""Consequence effects as an explicit, ordered list of variants.

compile_effects() turns the declarative ConsequenceEffects block into
effect objects in application order (flags, node states, sanity, emotion,
world event). Archetype rules are resolved at compile time: the Emotion
Engine sanity multiplier scales an existing delta, and SetEmotion is only
emitted for the Emotion Engine archetype.

apply_effect() mutates the engine's PlayerState for one variant. Sanity
and world events route through the StoryEngine so its clamping and
logging apply.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from .models import Archetype, ConsequenceEffects, archetype_name

if TYPE_CHECKING:
    from .engine import StoryEngine


class SetFlag(BaseModel):
    kind: Literal["set_flag"] = "set_flag"
    name: str
    value: Any = True


class SetNodeState(BaseModel):
    kind: Literal["set_node_state"] = "set_node_state"
    node: str
    patch: dict[str, Any] = Field(default_factory=dict)


class ChangeSanity(BaseModel):
    kind: Literal["change_sanity"] = "change_sanity"
    delta: int | float


class SetEmotion(BaseModel):
    kind: Literal["set_emotion"] = "set_emotion"
    value: str


class TriggerWorldEvent(BaseModel):
    kind: Literal["trigger_world_event"] = "trigger_world_event"
    id: str


Effect = Annotated[
    Union[SetFlag, SetNodeState, ChangeSanity, SetEmotion, TriggerWorldEvent],
    Field(discriminator="kind"),
]


def compile_effects(effects: ConsequenceEffects | None, archetype: Archetype | str | None) -> list[Effect]:
    """Expand a declared effects block into ordered effect variants."""
    if effects is None:
        return []
    is_emotion_engine = archetype_name(archetype) == Archetype.EMOTION_ENGINE.value
    compiled: list[Effect] = []

    for name, value in effects.set_flags.items():
        compiled.append(SetFlag(name=name, value=value))

    for node, patch in effects.set_node_states.items():
        compiled.append(SetNodeState(node=node, patch=dict(patch or {})))

    # The multiplier only scales a delta that exists
    if effects.change_sanity is not None:
        delta = effects.change_sanity
        if is_emotion_engine and effects.emotion_engine_sanity_multiplier is not None:
            delta = delta * effects.emotion_engine_sanity_multiplier
        compiled.append(ChangeSanity(delta=delta))

    if effects.set_emotion is not None and is_emotion_engine:
        compiled.append(SetEmotion(value=effects.set_emotion))

    if effects.trigger_world_event is not None:
        compiled.append(TriggerWorldEvent(id=effects.trigger_world_event))

    return compiled


def apply_effect(engine: StoryEngine, effect: Effect) -> None:
    """Apply one effect variant to the engine's player state."""
    player = engine.player
    if isinstance(effect, SetFlag):
        player.story_flags[effect.name] = effect.value
    elif isinstance(effect, SetNodeState):
        current = player.node_states.get(effect.node)
        if not isinstance(current, dict):
            current = {}
            player.node_states[effect.node] = current
        current.update(effect.patch)
    elif isinstance(effect, ChangeSanity):
        engine.update_sanity(effect.delta)
    elif isinstance(effect, SetEmotion):
        player.current_emotion = effect.value
    elif isinstance(effect, TriggerWorldEvent):
        engine.dispatch_world_event(effect.id)

"""Decision resolution: chosen decision → effects now, narration later."""

import logging

from .consequences import get_consequence_text
from .effects import apply_effect, compile_effects
from .engine import StoryEngine
from .models import Archetype, ConsequenceDefinition, ConsequenceEffects, Decision

logger = logging.getLogger(__name__)


class DecisionSystem:
    def __init__(self, engine: StoryEngine) -> None:
        self.engine = engine

    def make_decision(self, decision_index: int) -> Decision | None:
        """Resolve the pending decision at ``decision_index``.

        Inert (returns None) unless a choice is pending and the index is in
        range. The gate reopens synchronously; narration follows later.
        """
        engine = self.engine
        if not engine.is_waiting_for_decision:
            return None
        if isinstance(decision_index, bool) or not isinstance(decision_index, int):
            return None
        if not 0 <= decision_index < len(engine.available_decisions):
            return None

        decision = engine.available_decisions[decision_index]
        engine.log_event(f"Chose: {decision.text}", "decision")
        self.process_consequence(decision.consequence, decision.context)
        engine.clear_choice()
        return decision

    def process_consequence(self, consequence: str | None, context: str | None) -> None:
        engine = self.engine
        deliver = None
        try:
            definition = self.get_consequence_text(consequence)
            player = engine.player

            if consequence == "geode_touch" and player.archetype == Archetype.EMOTION_ENGINE.value:
                effects = definition.effects or ConsequenceEffects()
                effects.set_node_states.setdefault("geode", {})["lastTouchedEmotion"] = player.current_emotion
                definition.effects = effects

            for effect in compile_effects(definition.effects, player.archetype):
                try:
                    apply_effect(engine, effect)
                except Exception as e:
                    logger.warning(f"Error applying {effect.kind} for {consequence!r}: {e}")

            text = definition.text
            epoch = engine.choice_epoch

            def deliver() -> None:
                try:
                    if epoch != engine.choice_epoch:
                        logger.debug(f"Consequence narration for {consequence!r} dropped: new decision pending")
                        return
                    engine.update_story(text, ["fade-in"])
                    engine.log_event(text, "consequence")
                except Exception as e:
                    logger.warning(f"Error processing consequence text: {e}")

            logger.debug(f"Resolved consequence {consequence!r} (context={context!r})")
        except Exception as e:
            logger.warning(f"Error processing consequence {consequence!r}: {e}")

        # Fires on every consequence, before and independently of the narration delay
        engine.trigger_environment_change(consequence)

        if deliver is None:
            return
        try:
            engine.schedule(engine.settings.consequence_delay, deliver)
        except Exception as e:
            logger.warning(f"Could not schedule narration for {consequence!r}: {e}")

    def get_consequence_text(self, consequence: str | None) -> ConsequenceDefinition:
        return get_consequence_text(consequence)

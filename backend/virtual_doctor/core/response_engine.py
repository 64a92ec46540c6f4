"""
Keyword-matching response engine for the virtual doctor chat

The engine keeps no mutable state of its own. Each call takes the caller's
ConversationState and returns the next one together with the reply, so a
conversation's greeting flag and tip rotation live wherever the caller keeps
them (see conversation_store).
"""
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

from virtual_doctor.core import health_knowledge
from virtual_doctor.core.health_knowledge import Problem


class Intent(str, Enum):
    """Which branch of the priority chain produced a reply"""
    GREETING = "greeting"
    THANKS = "thanks"
    FAREWELL = "farewell"
    HEALTH_TIP = "health_tip"
    PROBLEM = "problem"
    FALLBACK = "fallback"


    """Per-conversation state; tips are drawn from the conversation's own seed"""
@dataclass
class ConversationState:
    """Per-conversation state: greeting flag, tips not yet shown this cycle and the seed for the next draw"""
    greeted: bool
    remaining_tips: Tuple[str, ...]
    tip_seed: int = 0


class EngineResult(NamedTuple):
    state: ConversationState
    reply: str
    intent: Intent
    keyword: Optional[str] = None


class ResponseEngine:
    """
    Picks exactly one canned reply for an inbound message.

    Priority (first match wins): greeting on the first message of a
    conversation, "thank", "bye", "health tip", the first problem keyword
    found in table order, fallback. Matching is plain substring containment
    on the lowercased message.
    """

    def __init__(
        self,
        tips: Sequence[str] = health_knowledge.HEALTH_TIPS,
        problems: Iterable[Problem] = health_knowledge.PROBLEMS,
        rng: Optional[random.Random] = None,
    ):
        if not tips:
            raise ValueError("Tip catalog must not be empty")
        self.tips: Tuple[str, ...] = tuple(tips)
        self.problems: Tuple[Problem, ...] = tuple(
            Problem(p.keyword.lower(), p.solution, p.medicine) for p in problems
        )
        self._rng = rng or random.Random()

    def new_state(self) -> ConversationState:
        """
        State of a conversation that has not started yet

        Only this method touches the engine's random source; callers creating
        conversations from several threads must serialize their calls.
        """
        return ConversationState(
            greeted=False,
            remaining_tips=self.tips,
            tip_seed=self._rng.getrandbits(64),
        )

    def respond(self, state: ConversationState, message: str) -> EngineResult:
        if not state.greeted:
            return EngineResult(
                replace(state, greeted=True),
                health_knowledge.GREETING_REPLY,
                Intent.GREETING,
            )

        text = message.lower()

        if "thank" in text:
            return EngineResult(state, health_knowledge.THANKS_REPLY, Intent.THANKS)

        if "bye" in text:
            return EngineResult(state, health_knowledge.FAREWELL_REPLY, Intent.FAREWELL)

        if "health tip" in text:
            tip, remaining, seed = self.draw_tip(state.remaining_tips, state.tip_seed)
            return EngineResult(
                replace(state, remaining_tips=remaining, tip_seed=seed),
                health_knowledge.TIP_REPLY.format(tip=tip),
                Intent.HEALTH_TIP,
            )

        problem = self.match_problem(text)
        if problem is not None:
            reply = health_knowledge.PROBLEM_REPLY.format(
                keyword=problem.keyword,
                solution=problem.solution,
                medicine=problem.medicine,
            )
            return EngineResult(state, reply, Intent.PROBLEM, problem.keyword)

        return EngineResult(state, health_knowledge.FALLBACK_REPLY, Intent.FALLBACK)

    def draw_tip(self, remaining: Tuple[str, ...], seed: int) -> Tuple[str, Tuple[str, ...], int]:
        """
        Remove one tip at random from the pool.

        An exhausted pool is refilled from the full catalog before drawing, so
        no tip repeats within a cycle. The draw depends only on the arguments.

        Returns:
            (tip, pool without that tip, seed for the next draw)
        """
        if not remaining:
            remaining = self.tips
        rng = random.Random(seed)
        index = rng.randrange(len(remaining))
        return remaining[index], remaining[:index] + remaining[index + 1:], rng.getrandbits(64)

    def match_problem(self, text: str) -> Optional[Problem]:
        """First problem, in table order, whose keyword occurs in the lowercased text"""
        for problem in self.problems:
            if problem.keyword in text:
                return problem
        return None

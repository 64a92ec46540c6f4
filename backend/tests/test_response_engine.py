"""
Tests for the keyword-matching response engine
"""
import random
from collections import Counter

import pytest

from virtual_doctor.core import health_knowledge
from virtual_doctor.core.health_knowledge import Problem
from virtual_doctor.core.response_engine import (ConversationState, Intent,
                                                 ResponseEngine)


def greeted(engine: ResponseEngine) -> ConversationState:
    """State right after the greeting turn"""
    return engine.respond(engine.new_state(), "hello").state


def reply_to(engine: ResponseEngine, message: str):
    return engine.respond(greeted(engine), message)


def test_new_state_is_not_greeted(engine):
    state = engine.new_state()
    assert state.greeted is False
    assert state.remaining_tips == health_knowledge.HEALTH_TIPS


@pytest.mark.parametrize("message", ["hello", "thanks", "bye", "health tip", "headache", ""])
def test_first_message_is_always_greeted(engine, message):
    """The first turn greets no matter what the message says"""
    result = engine.respond(engine.new_state(), message)

    assert result.intent == Intent.GREETING
    assert result.reply == health_knowledge.GREETING_REPLY
    assert result.state.greeted is True


def test_greeting_happens_once(engine):
    state = greeted(engine)
    for message in ["hello", "hi there", "hello again"]:
        result = engine.respond(state, message)
        assert result.intent != Intent.GREETING
        state = result.state


def test_respond_does_not_mutate_input_state(engine):
    state = engine.new_state()
    result = engine.respond(state, "hi")

    assert state.greeted is False
    assert result.state is not state


@pytest.mark.parametrize("message,intent,reply", [
    ("Thank you so much", Intent.THANKS, health_knowledge.THANKS_REPLY),
    ("thanks", Intent.THANKS, health_knowledge.THANKS_REPLY),
    ("I am thankful", Intent.THANKS, health_knowledge.THANKS_REPLY),
    ("bye bye", Intent.FAREWELL, health_knowledge.FAREWELL_REPLY),
    ("Goodbye doctor", Intent.FAREWELL, health_knowledge.FAREWELL_REPLY),
    ("what is the weather", Intent.FALLBACK, health_knowledge.FALLBACK_REPLY),
    ("xyz123", Intent.FALLBACK, health_knowledge.FALLBACK_REPLY),
    ("", Intent.FALLBACK, health_knowledge.FALLBACK_REPLY),
])
def test_canned_replies(engine, message, intent, reply):
    result = reply_to(engine, message)

    assert result.intent == intent
    assert result.reply == reply


def test_thanks_wins_over_bye(engine):
    assert reply_to(engine, "thanks and bye").intent == Intent.THANKS


def test_bye_wins_over_problem(engine):
    assert reply_to(engine, "bye, my headache is gone").intent == Intent.FAREWELL


def test_health_tip_wins_over_problem(engine):
    result = reply_to(engine, "give me a health tip for my headache")

    assert result.intent == Intent.HEALTH_TIP
    assert result.keyword is None


def test_problem_reply_format(engine):
    result = reply_to(engine, "I have a headache")

    assert result.intent == Intent.PROBLEM
    assert result.keyword == "headache"
    assert result.reply == (
        "Solution for headache: You should take rest, avoid screen time, and stay hydrated.. "
        "Medicine: You can take paracetamol or ibuprofen for relief.."
    )


@pytest.mark.parametrize("message,keyword", [
    ("I have a FEVER", "fever"),
    ("bad Cough since monday", "cough"),
    ("my stomach ache is worse", "stomach ache"),
    ("fever and headache", "headache"),
    ("cough, fever", "fever"),
    ("my stomach ache and fever", "fever"),
])
def test_problem_matching(engine, message, keyword):
    """Case-insensitive substring match, first keyword in table order wins"""
    result = reply_to(engine, message)

    assert result.intent == Intent.PROBLEM
    assert result.keyword == keyword


def test_problem_keyword_needs_exact_substring(engine):
    assert reply_to(engine, "stomachache").intent == Intent.FALLBACK


def test_non_tip_turns_leave_tip_pool_alone(engine):
    state = greeted(engine)
    for message in ["thanks", "bye", "headache", "???"]:
        result = engine.respond(state, message)
        assert result.state.remaining_tips == state.remaining_tips


def test_tips_do_not_repeat_within_a_cycle(engine):
    state = greeted(engine)
    tips = []
    for _ in range(len(health_knowledge.HEALTH_TIPS)):
        result = engine.respond(state, "health tip please")
        assert result.reply.startswith("Here is a health tip for you: ")
        tips.append(result.reply[len("Here is a health tip for you: "):])
        state = result.state

    assert sorted(tips) == sorted(health_knowledge.HEALTH_TIPS)
    assert state.remaining_tips == ()


def test_tip_pool_refills_after_exhaustion(engine):
    state = greeted(engine)
    cycles = 3
    counts = Counter()
    for _ in range(cycles * len(health_knowledge.HEALTH_TIPS)):
        result = engine.respond(state, "HEALTH TIP")
        counts[result.reply] += 1
        state = result.state

    assert len(counts) == len(health_knowledge.HEALTH_TIPS)
    assert set(counts.values()) == {cycles}


def test_draw_tip_from_empty_pool_uses_full_catalog(engine):
    tip, remaining, _ = engine.draw_tip((), seed=42)

    assert tip in health_knowledge.HEALTH_TIPS
    assert len(remaining) == len(health_knowledge.HEALTH_TIPS) - 1
    assert tip not in remaining


def test_draw_tip_depends_only_on_its_arguments(engine):
    pool = health_knowledge.HEALTH_TIPS

    assert engine.draw_tip(pool, seed=99) == engine.draw_tip(pool, seed=99)


def test_tip_sequence_follows_the_conversation_seed():
    """The same conversation state gives the same tips whatever other conversations do"""
    engine = ResponseEngine(rng=random.Random(3))
    state = greeted(engine)

    def tips_from(start):
        s, tips = start, []
        for _ in range(4):
            result = engine.respond(s, "health tip")
            tips.append(result.reply)
            s = result.state
        return tips

    first = tips_from(state)
    other = greeted(engine)
    for _ in range(5):
        other = engine.respond(other, "health tip").state

    assert tips_from(state) == first


def test_seeded_engines_agree():
    a = ResponseEngine(rng=random.Random(7))
    b = ResponseEngine(rng=random.Random(7))
    state_a, state_b = greeted(a), greeted(b)
    for _ in range(5):
        ra = a.respond(state_a, "health tip")
        rb = b.respond(state_b, "health tip")
        assert ra.reply == rb.reply
        state_a, state_b = ra.state, rb.state


def test_custom_catalog_keywords_are_lowercased():
    engine = ResponseEngine(
        tips=["Sleep well."],
        problems=[Problem("Back Pain", "Stretch gently", "Try a heat pad")],
    )
    result = engine.respond(greeted(engine), "my BACK PAIN is bad")

    assert result.keyword == "back pain"
    assert result.reply == "Solution for back pain: Stretch gently. Medicine: Try a heat pad."


def test_single_tip_catalog_repeats_that_tip():
    engine = ResponseEngine(tips=["Sleep well."])
    state = greeted(engine)
    for _ in range(3):
        result = engine.respond(state, "health tip")
        assert result.reply == "Here is a health tip for you: Sleep well."
        state = result.state


def test_empty_tip_catalog_rejected():
    with pytest.raises(ValueError):
        ResponseEngine(tips=[])

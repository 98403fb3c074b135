from __future__ import annotations

from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.use_cases.guided_intake import GuidedIntakeFlow, IntakeStep
from studio_desk.domain.entities.assistant_reply import AssistantAction
from studio_desk.infrastructure.sheets.class_catalog import StaticClassCatalog


def _flow() -> GuidedIntakeFlow:
    return GuidedIntakeFlow(ClassFinder(StaticClassCatalog()))


def test_age_is_asked_again_until_a_number_is_given():
    flow = _flow()

    turn = flow.handle("she loves to dance")

    assert flow.step == IntakeStep.AWAITING_AGE
    assert turn.reply.message.startswith("I didn't catch that")
    assert turn.recommendation is None


def test_age_style_day_leads_to_recommendation():
    flow = _flow()

    flow.handle("She's 6")
    assert flow.step == IntakeStep.AWAITING_STYLE
    flow.handle("Hip Hop")
    assert flow.step == IntakeStep.AWAITING_DAY
    turn = flow.handle("Wednesday")

    assert turn.reply.action == AssistantAction.GET_CLASSES
    assert turn.recommendation.match_type == "direct"
    assert turn.reply.recommended_classes == ("Hip Hop Kids",)
    assert turn.reply.preferences.age == 6
    assert turn.reply.preferences.style == "hip hop"
    assert flow.step == IntakeStep.AWAITING_AGE


def test_closest_matches_are_labelled():
    flow = _flow()
    for text in ("7", "tap", "weekends"):
        turn = flow.handle(text)

    assert turn.recommendation.match_type == "closest"
    assert "couldn't find perfect matches" in turn.reply.message


def test_restart_clears_preferences():
    flow = _flow()
    flow.handle("5")
    flow.handle("ballet")

    reply = flow.restart()

    assert flow.step == IntakeStep.AWAITING_AGE
    assert flow.preferences.age is None
    assert "age" in reply.message

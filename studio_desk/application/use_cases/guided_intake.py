from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from studio_desk.application.use_cases.class_finder import ClassFinder, Recommendation
from studio_desk.application.utils.class_rules import extract_age
from studio_desk.domain.entities.assistant_reply import AssistantAction, AssistantReply
from studio_desk.domain.entities.preferences import ConversationPreferences

WELCOME_MESSAGE = (
    "Hi there! I'm your Dance Class Assistant. Let's find the perfect dance class!\n"
    "\n"
    "I'll ask you a few questions to understand what you're looking for.\n"
    "\n"
    "First, how old is your child? (e.g., '5 years old' or 'She's 7')"
)


class IntakeStep(str, Enum):
    AWAITING_AGE = "awaiting_age"
    AWAITING_STYLE = "awaiting_style"
    AWAITING_DAY = "awaiting_day"


@dataclass(frozen=True)
class IntakeTurn:
    reply: AssistantReply
    recommendation: Recommendation | None = None


class GuidedIntakeFlow:
    """Scripted age -> style -> day intake, used when no language model is configured."""

    def __init__(self, finder: ClassFinder) -> None:
        self._finder = finder
        self._step = IntakeStep.AWAITING_AGE
        self._preferences = ConversationPreferences()

    @property
    def step(self) -> IntakeStep:
        return self._step

    @property
    def preferences(self) -> ConversationPreferences:
        return self._preferences

    def restart(self) -> AssistantReply:
        self._step = IntakeStep.AWAITING_AGE
        self._preferences = ConversationPreferences()
        return AssistantReply(message="Let's find more classes! What's your child's age?")

    def handle(self, text: str) -> IntakeTurn:
        if self._step == IntakeStep.AWAITING_AGE:
            age = extract_age(text)
            if age is None:
                return self._say(
                    "I didn't catch that. Could you tell me your child's age? "
                    "For example, '5 years old' or 'She's 7'"
                )
            self._preferences = replace(self._preferences, age=age)
            self._step = IntakeStep.AWAITING_STYLE
            return self._say(
                f"Great! I see your child is {age} years old.\n\n"
                "What style of dance are you interested in? "
                "(e.g., ballet, hip hop, jazz, tap, or 'not sure')"
            )

        if self._step == IntakeStep.AWAITING_STYLE:
            self._preferences = replace(self._preferences, style=text.strip().lower())
            self._step = IntakeStep.AWAITING_DAY
            return self._say(
                f"Got it! You're interested in {self._preferences.style}.\n\n"
                "Do you have a preferred day of the week for classes? "
                "(e.g., 'Monday', 'weekends', or 'any day')"
            )

        self._preferences = replace(self._preferences, day_preference=text.strip().lower())
        recommendation = self._finder.recommend(self._preferences)
        # Next message starts a fresh search, keeping what we learned for the booking summary.
        self._step = IntakeStep.AWAITING_AGE

        if not recommendation.classes:
            message = "I couldn't find any classes that match your criteria."
        elif recommendation.match_type == "direct":
            message = "Here are some classes that match your preferences:"
        else:
            message = "I couldn't find perfect matches, but here are some similar classes that might work:"

        reply = AssistantReply(
            message=message,
            action=AssistantAction.GET_CLASSES,
            preferences=self._preferences,
            recommended_classes=tuple(c.name for c in recommendation.classes),
        )
        return IntakeTurn(reply=reply, recommendation=recommendation)

    def _say(self, message: str) -> IntakeTurn:
        return IntakeTurn(reply=AssistantReply(message=message, preferences=self._preferences))

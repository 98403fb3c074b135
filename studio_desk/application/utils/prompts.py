from __future__ import annotations

import json
from collections import defaultdict

from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.domain.entities.preferences import ConversationPreferences

DAY_ORDER = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

STUDIO_CONTEXT = """
Dance Season:
- 2025-2026: Sept 8 to June 15 (10-month)
- Registration fee: $65 at sign-up

Monthly Tuition (Sept-June):
- Drop-in: $35
- 1 class/week: $100
- 2 classes/week: $195
- 3 classes/week: $285
- 4 classes/week: $365
- 5 classes/week: $445
- 6-8 classes/week: $515
- 9+ classes: add $25 per class
- Family (6-8 classes each): 2 dancers -> $700; 3 dancers -> $975

Billing & Payments:
- Monthly fixed rate, regardless of number of classes per month
- Auto credit-card only; no cash/check
- Due 1st; delinquent if not paid by 6 pm on 5th

Refunds & Class Changes:
- No refunds after first class
- Class changes via email; transfer if space; new class start next week
- Full withdrawal: email two weeks before month; otherwise tuition continues

Attendance & Studio Rules:
- Arrive 10 min early; >15 min late may affect participation
- Dress code: hair in bun for ballet; ponytail for others
- No food/drinks/gum in studio/lobby (water OK)

Showcase (mid-June):
- All enrolled dancers participate
- Costume charges in early March
""".strip()


def _format_class_line(cls: DanceClass) -> str:
    line = f"- {cls.name} (Ages {cls.age_range or 'All ages'}) at {cls.time or 'TBD'}"
    if cls.instructor and cls.instructor != "TBD":
        line += f" with {cls.instructor}"
    if cls.description and cls.description != "No description available":
        line += f" - {cls.description}"
    if cls.level:
        line += f" [{cls.level}]"
    return line


def format_classes_for_prompt(classes: list[DanceClass]) -> str:
    named = [c for c in classes if c.name and c.name.strip()]
    if not named:
        return "No classes currently available."

    by_day: dict[str, list[DanceClass]] = defaultdict(list)
    for cls in named:
        by_day[cls.day or "TBD"].append(cls)

    # Known weekdays first, in calendar order, then anything else in first-seen order.
    ordered_days = [d for d in DAY_ORDER if d in by_day] + [d for d in by_day if d not in DAY_ORDER]

    lines = ["AVAILABLE CLASSES:"]
    for day in ordered_days:
        lines.append("")
        lines.append(f"{day}:")
        lines.extend(_format_class_line(cls) for cls in by_day[day])
    return "\n".join(lines)


def build_system_prompt(classes: list[DanceClass], preferences: ConversationPreferences) -> str:
    return (
        "You are a friendly concierge for a dance studio. Be warm, conversational, and helpful.\n"
        "\n"
        "STUDIO CONTEXT:\n"
        f"{STUDIO_CONTEXT}\n"
        "\n"
        f"{format_classes_for_prompt(classes)}\n"
        "\n"
        "Your role:\n"
        "- Answer questions using the provided studio context and class information above\n"
        "- Help families find the perfect dance class for their child\n"
        "- Start by asking about the child's age, preferred dance style, and what days work best\n"
        "- Always end your responses with ONE clear question\n"
        "- When suggesting classes, mention specific class names, times, ages, and instructors\n"
        "- After recommending classes, offer to schedule a callback with the studio owner\n"
        "- Only use the schedule_call action when the user explicitly says YES to a callback\n"
        "- When using schedule_call, do not ask for contact details; the booking form handles that\n"
        "\n"
        "RESPONSE FORMAT:\n"
        "Return ONLY valid JSON. No markdown. No extra text.\n"
        "{\n"
        '  "message": "Your response to the user",\n'
        '  "action": "continue|get_classes|schedule_call",\n'
        '  "preferences": {"age": number or null, "style": "string or null", "dayPreference": "string or null"},\n'
        '  "recommendedClasses": ["class names that match their preferences"]\n'
        "}\n"
        "\n"
        f"Current user preferences: {json.dumps(preferences.to_dict())}\n"
    )

from __future__ import annotations

import re

AGE_BUCKET_ORDER = ("toddler", "preschool", "elementary", "teen", "adult", "all-ages")

AGE_BUCKET_LABELS = {
    "toddler": "Toddler (1-3)",
    "preschool": "Preschool (4-6)",
    "elementary": "Elementary (7-12)",
    "teen": "Teen (13-17)",
    "adult": "Adult (18+)",
    "all-ages": "All Ages",
}

STYLE_KEYWORDS = (
    ("ballet", ("ballet",)),
    ("jazz", ("jazz",)),
    ("tap", ("tap",)),
    ("hip-hop", ("hip hop", "hip-hop")),
    ("contemporary", ("contemporary",)),
    ("musical-theater", ("musical theater", "musical theatre")),
    ("lyrical", ("lyrical",)),
    ("acro", ("acro",)),
)


def extract_dance_styles(class_name: str) -> list[str]:
    name = (class_name or "").lower()
    return [style for style, keywords in STYLE_KEYWORDS if any(k in name for k in keywords)]


def age_bucket(age_range: str | None) -> str:
    """Map a free-text age range ("4-6", "Teens", "Adult") to a catalog filter bucket."""
    if not age_range or not age_range.strip():
        return "all-ages"

    text = age_range.lower()
    numbers = [int(n) for n in re.findall(r"\d+", text)]
    min_age = numbers[0] if numbers else 0
    max_age = numbers[1] if len(numbers) > 1 else min_age

    if "adult" in text or min_age >= 18:
        return "adult"
    if "teen" in text or min_age >= 13 or (min_age >= 12 and max_age >= 15):
        return "teen"
    if min_age >= 8 or (min_age >= 6 and max_age >= 10):
        return "elementary"
    if min_age >= 4 or (min_age >= 3 and max_age >= 6):
        return "preschool"
    if 1 <= min_age <= 3:
        return "toddler"
    if "all" in text:
        return "all-ages"

    if max_age <= 3:
        return "toddler"
    if max_age <= 6:
        return "preschool"
    if max_age <= 12:
        return "elementary"
    if max_age <= 17:
        return "teen"
    return "all-ages"


def age_fits(age: int | None, age_range: str | None) -> bool:
    """True when `age` falls inside an "a-b" range. Unknown ages or free-text ranges match."""
    if age is None or not age_range:
        return True
    match = re.match(r"^\s*(\d+)\s*-\s*(\d+)", age_range)
    if not match:
        return True
    low, high = int(match.group(1)), int(match.group(2))
    return low <= age <= high


def extract_age(text: str) -> int | None:
    match = re.search(r"\d+", text or "")
    return int(match.group(0)) if match else None

"""Rule-based classification of activity descriptors (titles, URLs, app names)."""
from __future__ import annotations

import re
from typing import Dict, List, Pattern, Tuple

from shame_engine.models import ActivityCategory


def _compile(patterns: List[str]) -> List[Pattern[str]]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


PROCRASTINATION_PATTERNS = _compile(
    [
        r"youtube\.com",
        r"netflix\.com",
        r"twitch\.tv",
        r"tiktok\.com",
        r"instagram\.com",
        r"facebook\.com",
        r"amazon\.com(?!.*aws)",
        r"ebay\.com",
        r"etsy\.com",
        r"pinterest\.com",
        r"9gag\.com",
        r"buzzfeed\.com",
        r"imgur\.com",
        r"tumblr\.com",
        r"spotify\.com",
        r"steam",
        r"gaming",
        r"miniclip",
        r"coolmath",
        r"wordle",
    ]
)

PROCRASTINATION_APPS = _compile(
    [
        r"spotify",
        r"netflix",
        r"youtube",
        r"discord",
        r"steam",
        r"epic games",
        r"minecraft",
        r"photobooth",
    ]
)

PRODUCTIVE_PATTERNS = _compile(
    [
        r"github\.com",
        r"gitlab\.com",
        r"bitbucket\.org",
        r"stackoverflow\.com",
        r"docs\.google\.com",
        r"notion\.so",
        r"linear\.app",
        r"jira",
        r"confluence",
        r"figma\.com",
        r"vercel\.com",
        r"netlify\.com",
        r"aws\.amazon\.com",
        r"console\.cloud\.google",
        r"portal\.azure\.com",
        r"localhost",
        r"127\.0\.0\.1",
        r"slack\.com",
        r"teams\.microsoft\.com",
    ]
)

PRODUCTIVE_APPS = _compile(
    [
        r"vscode|vs code|visual studio",
        r"intellij|webstorm|pycharm",
        r"terminal|iterm|warp|kitty",
        r"sublime text",
        r"vim|neovim",
        r"docker",
        r"postman|insomnia",
        r"xcode",
        r"android studio",
    ]
)

PRODUCTIVE_ADJACENT_PATTERNS = _compile(
    [
        r"udemy\.com",
        r"coursera\.org",
        r"pluralsight\.com",
        r"egghead\.io",
        r"frontendmasters\.com",
        r"freecodecamp\.org",
        r"mdn|developer\.mozilla",
        r"w3schools\.com",
        r"arxiv\.org",
        r"wikipedia\.org",
        r"docs\.",
        r"documentation",
        r"tutorial",
        r"learn",
    ]
)

QUESTIONABLE_PATTERNS = _compile(
    [
        r"reddit\.com",
        r"twitter\.com|x\.com",
        r"news\.ycombinator\.com",
        r"medium\.com",
        r"dev\.to",
        r"hashnode",
        r"quora\.com",
        r"linkedin\.com",
        r"discord\.com",
        r"producthunt\.com",
    ]
)

# Order encodes precedence: the first matching group wins.
RULE_GROUPS: Tuple[Tuple[ActivityCategory, List[Pattern[str]]], ...] = (
    ("blatant_procrastination", PROCRASTINATION_PATTERNS + PROCRASTINATION_APPS),
    ("productive", PRODUCTIVE_PATTERNS + PRODUCTIVE_APPS),
    ("productive_adjacent", PRODUCTIVE_ADJACENT_PATTERNS),
    ("questionable", QUESTIONABLE_PATTERNS),
)

DEFAULT_CATEGORY: ActivityCategory = "questionable"

WASTE_WEIGHTS: Dict[ActivityCategory, float] = {
    "productive": 0.0,
    "productive_adjacent": 0.2,
    "questionable": 0.6,
    "blatant_procrastination": 1.0,
}

WASTED_CATEGORIES = frozenset({"questionable", "blatant_procrastination"})

_LABELS: Dict[ActivityCategory, str] = {
    "productive": "Actually working (suspicious 🤔)",
    "productive_adjacent": '"Research" (sure, buddy)',
    "questionable": "Hmm, debatable... 🧐",
    "blatant_procrastination": "Caught red-handed! 🚨",
}


def classify_activity(text: str) -> ActivityCategory:
    """Map a title, URL or app name to a productivity category."""

    for category, patterns in RULE_GROUPS:
        for pattern in patterns:
            if pattern.search(text or ""):
                return category
    return DEFAULT_CATEGORY


def category_waste_weight(category: ActivityCategory) -> float:
    return WASTE_WEIGHTS[category]


def is_wasted(category: ActivityCategory) -> bool:
    return category in WASTED_CATEGORIES


def category_label(category: ActivityCategory) -> str:
    return _LABELS[category]


__all__ = [
    "RULE_GROUPS",
    "DEFAULT_CATEGORY",
    "WASTE_WEIGHTS",
    "classify_activity",
    "category_waste_weight",
    "is_wasted",
    "category_label",
]

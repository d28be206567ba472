"""Naming service — haiku-style account names and derived volume names."""

from __future__ import annotations

import random
import re
from typing import Optional

_ADJECTIVES = (
    "autumn", "hidden", "bitter", "misty", "silent", "empty", "dry", "dark",
    "summer", "icy", "delicate", "quiet", "white", "cool", "spring", "winter",
    "patient", "twilight", "dawn", "crimson", "wispy", "weathered", "blue",
    "billowing", "broken", "cold", "damp", "falling", "frosty", "green",
    "long", "late", "bold", "little", "morning", "muddy", "old", "red",
    "rough", "still", "small", "sparkling", "shy", "wandering", "withered",
    "wild", "black", "young", "holy", "solitary", "fragrant", "aged",
    "snowy", "proud", "floral", "restless", "divine", "polished", "ancient",
    "purple", "lively", "nameless",
)

_NOUNS = (
    "waterfall", "river", "breeze", "moon", "rain", "wind", "sea", "morning",
    "snow", "lake", "sunset", "pine", "shadow", "leaf", "dawn", "glitter",
    "forest", "hill", "cloud", "meadow", "sun", "glade", "bird", "brook",
    "butterfly", "bush", "dew", "dust", "field", "fire", "flower", "firefly",
    "feather", "grass", "haze", "mountain", "night", "pond", "darkness",
    "snowflake", "silence", "sound", "sky", "shape", "surf", "thunder",
    "violet", "water", "wildflower", "wave", "resonance", "wood", "dream",
    "cherry", "tree", "fog", "frost", "voice", "paper", "frog", "smoke", "star",
)


def generate_account_name(prefix: str = "anf", rng: Optional[random.Random] = None) -> str:
    """Generate an account name: {prefix}-{adjective}-{noun}-{4 digits}."""
    rng = rng or random.Random()
    name = "-".join([
        prefix,
        rng.choice(_ADJECTIVES),
        rng.choice(_NOUNS),
        f"{rng.randint(0, 9999):04d}",
    ])
    return _sanitize(name)


def default_volume_name(account_name: str, pool_name: str) -> str:
    """Volume name used when none is configured."""
    return f"NFSv3-Vol-{account_name}-{pool_name}"


def _sanitize(name: str) -> str:
    """Sanitize a name to lowercase alphanumeric + hyphens."""
    name = name.lower().strip()
    name = re.sub(r"[^a-z0-9-]", "-", name)
    name = re.sub(r"-+", "-", name)
    return name.strip("-")

"""Internal constants shared across the library."""

MANIFEST_URL = "https://sync.runescape.wiki/runelite/manifest"
SUBMIT_URL = "https://sync.runescape.wiki/runelite/submit"
USER_AGENT = "wikisync-python"

SECONDS_BETWEEN_UPLOADS: float = 1.0
UPLOADS_PER_MANIFEST_CHECK: int = 2
SUBMIT_TIMEOUT_SECONDS: float = 3.0

# Cache archive holding varbit definitions.
VARBITS_ARCHIVE_ID = 14

# Recorded for fields the host cannot resolve (e.g. a varbit without a composition).
UNREADABLE_VALUE = -1

# Skill names in the order the host reports them.
SKILLS: tuple[str, ...] = (
    "Attack",
    "Defence",
    "Strength",
    "Hitpoints",
    "Ranged",
    "Prayer",
    "Magic",
    "Cooking",
    "Woodcutting",
    "Fletching",
    "Fishing",
    "Firemaking",
    "Crafting",
    "Smithing",
    "Mining",
    "Herblore",
    "Agility",
    "Thieving",
    "Slayer",
    "Farming",
    "Runecraft",
    "Hunter",
    "Construction",
)

"""Shop catalog: themes and consumable power-ups."""

from tensemaster.core.models import ShopItem


def _theme(item_id: str, name: str, description: str, cost: int, premium: bool = False) -> ShopItem:
    return ShopItem(id=item_id, name=name, description=description, type="theme", cost=cost, premium=premium)


def _power_up(item_id: str, name: str, description: str, cost: int) -> ShopItem:
    return ShopItem(id=item_id, name=name, description=description, type="power-up", cost=cost)


SHOP_ITEMS: tuple[ShopItem, ...] = (
    # Free themes
    _theme("deep-space", "Deep Space", "The sleek, default look for Tense Master AI.", 0),
    _theme("theme-high-contrast", "High Contrast", "Maximum readability for focused learning.", 0),
    # Normal themes
    _theme("theme-ocean", "Ocean Depths", "A calm and cool blue theme.", 250),
    _theme("theme-mint", "Minty Fresh", "A clean and refreshing light green theme.", 250),
    _theme("theme-emerald", "Emerald Forest", "A rich and vibrant green theme.", 300),
    _theme("theme-violet", "Violet Dream", "A deep and mysterious purple theme.", 300),
    _theme("theme-desert", "Desert Mirage", "A warm, sandy theme for adventurers.", 350),
    _theme("theme-nordic", "Nordic Twilight", "A cool, minimalist theme inspired by northern skies.", 350),
    _theme("theme-sakura", "Sakura Blossom", "A light and elegant pink theme.", 400),
    _theme("theme-lavender", "Lavender Field", "A calming and beautiful light purple theme.", 400),
    # Premium themes
    _theme("theme-synthwave", "Synthwave Sunset", "A vibrant retro theme.", 500, premium=True),
    _theme("theme-solar", "Solar Flare", "A warm and energetic orange theme.", 500, premium=True),
    _theme("theme-cyberpunk", "Cyberpunk Night", "High-tech neons in a futuristic city.", 600, premium=True),
    _theme("theme-crimson", "Crimson Peak", "A bold theme with striking red accents.", 600, premium=True),
    _theme("theme-aurora", "Northern Lights", "Celestial greens and purples.", 700, premium=True),
    _theme("theme-gilded", "Gilded Onyx", "Opulent gold on pure black.", 750, premium=True),
    _theme("theme-velvet", "Crimson Velvet", "Luxurious and rich deep reds.", 700, premium=True),
    _theme("theme-diamond", "Diamond Brilliance", "The ultimate luxury experience.", 1000, premium=True),
    # Power-ups
    _power_up("powerup-hint", "Hint", "Reveals the correct answer for one question.", 50),
    _power_up("powerup-5050", "50/50", "Removes two incorrect answers.", 75),
    _power_up("powerup-skip", "Skip Question", "Skips one question (counts as correct).", 100),
    _power_up("powerup-double-xp", "Double XP", "Doubles the XP earned from a quiz.", 150),
    _power_up("powerup-second-chance", "Second Chance", "Lets you change your answer for one question.", 125),
)


def get_item(item_id: str) -> ShopItem | None:
    for item in SHOP_ITEMS:
        if item.id == item_id:
            return item
    return None

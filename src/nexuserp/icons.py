from __future__ import annotations

from enum import Enum


class ModuleIcon(str, Enum):
    """Icon names a module may carry, mapped to Lucide glyph identifiers."""

    BOX = "Box"
    USERS = "Users"
    TRENDING_UP = "TrendingUp"
    PACKAGE = "Package"
    FILE_TEXT = "FileText"
    DATABASE = "Database"
    BRIEFCASE = "Briefcase"
    BUILDING = "Building"
    CALENDAR = "Calendar"
    CLIPBOARD = "Clipboard"
    DOLLAR_SIGN = "DollarSign"
    SHOPPING_CART = "ShoppingCart"
    TRUCK = "Truck"
    WRENCH = "Wrench"
    SETTINGS = "Settings"


GLYPHS: dict[ModuleIcon, str] = {
    ModuleIcon.BOX: "box",
    ModuleIcon.USERS: "users",
    ModuleIcon.TRENDING_UP: "trending-up",
    ModuleIcon.PACKAGE: "package",
    ModuleIcon.FILE_TEXT: "file-text",
    ModuleIcon.DATABASE: "database",
    ModuleIcon.BRIEFCASE: "briefcase",
    ModuleIcon.BUILDING: "building",
    ModuleIcon.CALENDAR: "calendar",
    ModuleIcon.CLIPBOARD: "clipboard",
    ModuleIcon.DOLLAR_SIGN: "dollar-sign",
    ModuleIcon.SHOPPING_CART: "shopping-cart",
    ModuleIcon.TRUCK: "truck",
    ModuleIcon.WRENCH: "wrench",
    ModuleIcon.SETTINGS: "settings",
}

DEFAULT_GLYPH = GLYPHS[ModuleIcon.BOX]


def parse_icon(name: str | None) -> ModuleIcon:
    try:
        return ModuleIcon(str(name or "").strip())
    except ValueError:
        return ModuleIcon.BOX


def resolve_icon(name: str | None) -> str:
    return GLYPHS.get(parse_icon(name), DEFAULT_GLYPH)

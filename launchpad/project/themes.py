"""Color themes offered during the theme-selection phase."""

from .models import ColorTheme

THEME_TEMPLATES: dict[str, ColorTheme] = {
    "modern-blue": ColorTheme(
        id="modern-blue",
        name="Modern Blue",
        primary="#3B82F6",
        secondary="#1E40AF",
        accent="#60A5FA",
        background="#F8FAFC",
        text="#1E293B",
        description="Professional and trustworthy",
    ),
    "vibrant-purple": ColorTheme(
        id="vibrant-purple",
        name="Vibrant Purple",
        primary="#8B5CF6",
        secondary="#6D28D9",
        accent="#A78BFA",
        background="#FAF5FF",
        text="#1F2937",
        description="Creative and energetic",
    ),
    "nature-green": ColorTheme(
        id="nature-green",
        name="Nature Green",
        primary="#10B981",
        secondary="#059669",
        accent="#34D399",
        background="#F0FDF4",
        text="#064E3B",
        description="Fresh and sustainable",
    ),
    "sunset-orange": ColorTheme(
        id="sunset-orange",
        name="Sunset Orange",
        primary="#F59E0B",
        secondary="#D97706",
        accent="#FBBF24",
        background="#FFFBEB",
        text="#78350F",
        description="Warm and inviting",
    ),
    "elegant-dark": ColorTheme(
        id="elegant-dark",
        name="Elegant Dark",
        primary="#6366F1",
        secondary="#4F46E5",
        accent="#818CF8",
        background="#0F172A",
        text="#F1F5F9",
        description="Sophisticated and modern",
    ),
    "minimal-gray": ColorTheme(
        id="minimal-gray",
        name="Minimal Gray",
        primary="#64748B",
        secondary="#475569",
        accent="#94A3B8",
        background="#FFFFFF",
        text="#0F172A",
        description="Clean and minimalist",
    ),
}

PLACEHOLDER_THEME = ColorTheme(
    id="placeholder",
    name="Placeholder",
    primary="#000000",
    secondary="#000000",
    accent="#000000",
    background="#FFFFFF",
    text="#000000",
    description="Placeholder theme",
)


def get_theme(theme_id: str) -> ColorTheme:
    """Look up a theme by ID.

    Raises:
        ValueError: If the ID is not a known theme
    """
    theme = THEME_TEMPLATES.get(theme_id)
    if theme is None:
        valid = ", ".join(sorted(THEME_TEMPLATES))
        raise ValueError(f"Unknown theme '{theme_id}'. Valid options: {valid}")
    return theme.model_copy(deep=True)

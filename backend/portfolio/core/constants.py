"""Application-wide constants for the portfolio backend."""

from __future__ import annotations

from datetime import datetime, timezone

BRAND_NAME = "Portfolio"
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Content and admin API for a film and photography portfolio"
API_VERSION = "1.0.0"

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 1000

# Storage buckets the status check expects to exist
DEFAULT_REQUIRED_BUCKETS = ("projects", "icons", "media", "public")

# Tables whose absence marks the site as not set up
ESSENTIAL_TABLES = ("projects", "media", "site_settings")

# Status endpoint caching
STATUS_CACHE_CONTROL = "public, max-age=30, s-maxage=30"

# Dependency scanning
REGISTRY_BATCH_SIZE = 10
SECURITY_SCORE_VULNERABLE_WEIGHT = 50
SECURITY_SCORE_OUTDATED_WEIGHT = 20
GLOBAL_UPDATE_MODE_KEY = "update_mode"
WIDGET_LAYOUTS_KEY = "widget_layouts"

# Media defaults
GENERIC_VIDEO_ICON = "/generic-icon.png"
CUSTOM_THUMBNAIL_CAPTION = "Custom Thumbnail"
DEFAULT_BTS_CATEGORY = "general"

DEFAULT_SITE_SETTINGS: dict[str, str] = {
    "hero_heading": "Film Production & Photography",
    "hero_subheading": "Director of Photography, Camera Assistant, Drone & Underwater Operator",
    "image_hero_bg": "/images/hero-bg.jpg",
    "about_heading": "About Me",
    "about_text1": "Film production professional working across directing, camera and photography.",
    "about_text2": (
        "Experience as Director of Photography, 1st and 2nd Assistant Camera, "
        "and drone and underwater operator."
    ),
    "about_text3": "Landscape and product photography outside of set work.",
    "image_profile": "/images/profile.jpg",
    "services_heading": "Services",
    "contact_heading": "Get in Touch",
    "contact_text": "Get in touch to discuss film production or photography projects.",
    "contact_email": "hello@example.com",
    "contact_phone": "",
    "footer_text": f"© {datetime.now(timezone.utc).year} All rights reserved.",
}

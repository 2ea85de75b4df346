from __future__ import annotations

from typing import Any

from packages.shared.schemas.cook_spot_v1 import MenuItemV1

SAMPLE_MENU: list[MenuItemV1] = [
    MenuItemV1(
        id="menu-braised-pork",
        name="Heirloom braised pork (limited)",
        description="Slow braised for hours, melts in the mouth.",
        price=280.0,
        image_url="https://images.unsplash.com/photo-1546069901-ba95155f52a7?w=100",
    ),
    MenuItemV1(
        id="menu-pickled-cucumber-pork",
        name="Pickled cucumber minced pork",
        description="Savory and rice-friendly, the old-fashioned way.",
        price=180.0,
        image_url="https://images.unsplash.com/photo-1563729781498-84225a07c1fe?w=100",
    ),
    MenuItemV1(
        id="menu-sesame-oil-chicken",
        name="Sesame oil chicken soup",
        description="Warming soup made with free-range chicken.",
        price=320.0,
        image_url="https://images.unsplash.com/photo-1588147822453-433d7b884d59?w=100",
    ),
    MenuItemV1(
        id="menu-seasonal-greens",
        name="Stir-fried seasonal greens",
        description="Picked the same day and flash fried.",
        price=120.0,
        is_available=False,
    ),
]

SAMPLE_REVIEWS: list[dict[str, Any]] = [
    {"id": "rev-1", "user_name": "Jenny C.", "comment": "Rich sauce, had two bowls of rice.", "rating": 5.0},
    {"id": "rev-2", "user_name": "David L.", "comment": "Fast delivery, soup a bit salty.", "rating": 4.0},
    {"id": "rev-3", "user_name": "Amy W.", "comment": "Fresh greens but pricey.", "rating": 3.5},
    {"id": "rev-4", "user_name": "Peter H.", "comment": "Bland compared to home.", "rating": 3.0},
]


def sample_cook_spot_documents() -> dict[str, dict[str, Any]]:
    """Raw catalog documents keyed by document id, in the shape the realtime source stores."""

    menu = [item.model_dump() for item in SAMPLE_MENU]
    return {
        "spot-lin": {
            "name": "Grandma Lin's Kitchen",
            "chef": "Lin Yu-chih",
            "cuisine": "Traditional Taiwanese",
            "description": "Slow-stewed classics, limited portions every day.",
            "rating": 4.9,
            "price_range": "mid",
            # Near Taipei 101
            "latitude": 25.0350,
            "longitude": 121.5650,
            "reviews": list(SAMPLE_REVIEWS),
            "menu": menu,
        },
        "spot-chou": {
            "name": "Teacher Chou's Healthy Kitchen",
            "chef": "Chou Wen-hua",
            "cuisine": "Light and healthy",
            "description": "Low oil lunch boxes for the office crowd.",
            "rating": 4.5,
            "price_range": "low",
            # Near Taipei Main Station
            "latitude": 25.0478,
            "longitude": 121.5175,
            "reviews": list(SAMPLE_REVIEWS),
            "menu": menu,
        },
        "spot-chen": {
            "name": "Chen Family Sichuan",
            "chef": "Chen Li-ping",
            "cuisine": "Sichuan",
            "description": "Chongqing noodles and numbing spicy pot.",
            "rating": 4.2,
            "price_range": "high",
            # Yonghe
            "latitude": 25.0064,
            "longitude": 121.5135,
            "reviews": list(SAMPLE_REVIEWS),
            "menu": menu,
        },
    }

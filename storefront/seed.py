"""Demo catalog and default admin account.

Safe to run more than once: existing admin/categories are reused and products
are only added to an empty catalog.
"""
import logging
import os
from decimal import Decimal

from . import errors, schemas

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = os.getenv("STOREFRONT_ADMIN_PASSWORD", "admin123")

CATEGORIES = [
    ("Electronics", "electronics"),
    ("Clothing", "clothing"),
    ("Home & Furniture", "home-furniture"),
    ("Beauty", "beauty"),
    ("Sports & Outdoors", "sports"),
    ("Books", "books"),
]

# (category slug, product fields)
PRODUCTS = [
    ("clothing", dict(
        name="Nike Air Max",
        description="Premium men's running shoes with Air cushioning technology for maximum comfort and support. "
                    "Perfect for running, training, or casual wear.",
        short_description="Men's Running Shoe",
        price=Decimal("129.99"),
        image_url="https://images.unsplash.com/photo-1542291026-7eec264c27ff",
        rating=4.5, is_new=True, brand="Nike",
    )),
    ("electronics", dict(
        name="Smart Watch Pro",
        description="Advanced smartwatch with health monitoring, GPS tracking, and notification features. "
                    "Water-resistant and compatible with iOS and Android.",
        short_description="Fitness Tracker",
        price=Decimal("199.99"),
        image_url="https://images.unsplash.com/photo-1523275335684-37898b6baf30",
        rating=4.0, is_sale=True, brand="SmartGear",
    )),
    ("electronics", dict(
        name="Wireless Headphones",
        description="Experience immersive sound with these wireless noise-cancelling headphones. "
                    "30-hour battery life and comfortable over-ear design.",
        short_description="Noise Cancelling",
        price=Decimal("149.99"),
        image_url="https://images.unsplash.com/photo-1505740420928-5e560c06d30e",
        rating=5.0, brand="SoundPro",
    )),
    ("electronics", dict(
        name="Smartphone X",
        description="High-performance smartphone with an amazing camera, all-day battery life, and premium design. "
                    "Features the latest mobile technology.",
        short_description="128GB, Midnight Black",
        price=Decimal("899.99"),
        image_url="https://images.unsplash.com/photo-1511707171634-5f897ff02aa9",
        rating=4.0, brand="TechMaster",
    )),
    ("home-furniture", dict(
        name="Minimalist Chair",
        description="Elegant minimalist chair made from high-quality materials. "
                    "Adds a touch of modern style to any room. Comfortable and durable.",
        short_description="Wooden, White",
        price=Decimal("89.99"),
        image_url="https://images.unsplash.com/photo-1503602642458-232111445657",
        rating=3.5, brand="ModernHome",
    )),
    ("electronics", dict(
        name="Digital Camera",
        description="Professional-grade digital camera with 24MP sensor and 4K video capabilities. "
                    "Ideal for photography enthusiasts and content creators.",
        short_description="24MP, 4K Video",
        price=Decimal("499.99"),
        image_url="https://images.unsplash.com/photo-1526170375885-4d8ecf77b99f",
        rating=4.0, is_sale=True, brand="CapturePro",
    )),
    ("electronics", dict(
        name="Wireless Earbuds",
        description="Compact, high-quality wireless earbuds with crystal-clear sound and long battery life. "
                    "Includes charging case and multiple ear tip sizes.",
        short_description="Bluetooth 5.0",
        price=Decimal("79.99"),
        image_url="https://images.unsplash.com/photo-1505751171710-1f6d0ace5a85",
        rating=4.0, brand="SoundPro",
    )),
    ("home-furniture", dict(
        name="Headphone Stand",
        description="Elegant aluminum headphone stand to display and store your headphones. "
                    "Keeps your desk organized while looking stylish.",
        short_description="Aluminum",
        price=Decimal("29.99"),
        image_url="https://images.unsplash.com/photo-1546435770-a3e426bf472b",
        rating=4.5, brand="DeskOrganizer",
    )),
]


def seed_demo_data(services) -> None:
    identity, catalog = services.identity, services.catalog

    if identity.users.get_by_username(ADMIN_USERNAME) is None:
        identity.create_user(
            schemas.UserCreate(
                username=ADMIN_USERNAME,
                password=ADMIN_PASSWORD,
                email="admin@example.com",
                first_name="Admin",
                last_name="User",
            ),
            is_admin=True,
        )

    category_ids = {}
    for name, slug in CATEGORIES:
        try:
            category = catalog.get_category(slug)
        except errors.NotFound:
            category = catalog.create_category(schemas.CategoryCreate(name=name, slug=slug))
        category_ids[slug] = category.id

    if catalog.list_products():
        return
    for slug, fields in PRODUCTS:
        catalog.create_product(schemas.ProductCreate(category_id=category_ids[slug], **fields))
    logger.info("seeded %d categories and %d products", len(CATEGORIES), len(PRODUCTS))

"""
catalog/demo.py -- Fixed demo catalog inserted by POST /api/admin/seed-demo.

Slugs are the idempotency key: CatalogStore.seed_demo() skips any product
whose slug is already present.
"""

from catalog.models import Product

DEMO_PRODUCTS: tuple[Product, ...] = (
    Product(
        name="Everest Adventure Hoodie",
        slug="everest-adventure-hoodie",
        description="Cozy hoodie built for play, with reinforced seams and soft fleece.",
        price=45.0,
        colors=[
            {"name": "Navy", "hex": "#1f3b6f"},
            {"name": "Heather Grey", "hex": "#bdbdbd"},
            {"name": "Forest Green", "hex": "#2b6b4a"},
        ],
        images=["https://images.unsplash.com/photo-1541099649105-f69ad21f3246?w=1000&q=80"],
        category="Hoodies & Sweatshirts",
        age_group="Big Kid",
    ),
    Product(
        name="Cosmic Explorer Glow-in-the-Dark Tee",
        slug="cosmic-explorer-tee",
        description="Glow-in-the-dark organic tee for little astronauts.",
        price=28.0,
        colors=[
            {"name": "Midnight Blue", "hex": "#0b2545"},
            {"name": "Charcoal Grey", "hex": "#4b4b4b"},
        ],
        images=["https://images.unsplash.com/photo-1541099649105-f69ad21f3246?w=900&q=80"],
        category="Graphic Tees",
        age_group="Little Kid",
    ),
)

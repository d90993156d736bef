"""Sample data for a fresh MedStore database."""

import structlog
from protean.domain import Domain
from protean.utils.globals import current_domain

from medstore.account.registration import RegisterUser
from medstore.account.user import User
from medstore.category.management import CreateCategory
from medstore.product.creation import CreateProduct

logger = structlog.get_logger(__name__)

ADMIN_EMAIL = "admin@rmtmedical.com"

CATEGORIES = [
    {"name": "Allopathic", "description": "All allopathic medicines", "featured": True},
    {"name": "Ayurvedic", "description": "All ayurvedic medicines", "featured": True},
    {"name": "Baby Care", "description": "Products for babies and infants", "featured": False},
    {"name": "Personal Care", "description": "Personal hygiene and care products", "featured": True},
]

# (category name, product fields)
PRODUCTS = [
    (
        "Allopathic",
        {
            "name": "Paracetamol",
            "description": "Fever and pain relief tablet",
            "price": 15.0,
            "mrp": 20.0,
            "stock": 100,
            "sub_category": "Pain Relief",
            "sku": "PCM001",
            "manufacturer": "Cipla",
            "dosage": "500mg",
            "featured": True,
        },
    ),
    (
        "Ayurvedic",
        {
            "name": "Ashwagandha",
            "description": "Ayurvedic stress relief supplement",
            "price": 150.0,
            "mrp": 180.0,
            "stock": 50,
            "sub_category": "Supplements",
            "sku": "ASH001",
            "manufacturer": "Dabur",
            "featured": True,
        },
    ),
    (
        "Baby Care",
        {
            "name": "Baby Lotion",
            "description": "Gentle moisturizing lotion for babies",
            "price": 120.0,
            "mrp": 140.0,
            "stock": 30,
            "sub_category": "Skin Care",
            "sku": "BL001",
            "manufacturer": "Johnson & Johnson",
        },
    ),
    (
        "Personal Care",
        {
            "name": "Antibacterial Soap",
            "description": "Kills germs and bacteria",
            "price": 40.0,
            "mrp": 45.0,
            "stock": 200,
            "sub_category": "Soaps",
            "sku": "ABS001",
            "manufacturer": "Dettol",
        },
    ),
]


def seed_data():
    """Create the sample admin, customer, categories and products.

    Returns False without writing anything when the admin account already
    exists.
    """
    users = current_domain.repository_for(User)
    if users.find_by_email(ADMIN_EMAIL):
        logger.info("seed_skipped", reason="admin_exists")
        return False

    users.add(User.register(name="Admin User", email=ADMIN_EMAIL, password="admin123", role="admin"))
    current_domain.process(
        RegisterUser(name="Test User", email="user@example.com", password="user123"),
        asynchronous=False,
    )

    category_ids = {}
    for fields in CATEGORIES:
        category_ids[fields["name"]] = current_domain.process(CreateCategory(**fields), asynchronous=False)

    for category_name, fields in PRODUCTS:
        current_domain.process(
            CreateProduct(category_id=category_ids[category_name], **fields),
            asynchronous=False,
        )

    logger.info("seed_completed", categories=len(CATEGORIES), products=len(PRODUCTS))
    return True


def seed(domain: Domain):
    with domain.domain_context():
        return seed_data()

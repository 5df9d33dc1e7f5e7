import uuid
from datetime import datetime, timezone
from decimal import Decimal

import boto3
from werkzeug.security import generate_password_hash

import config
from catalog import DEFAULT_CATEGORIES

dynamodb = boto3.resource('dynamodb', region_name=config.REGION)

# Tables
users_table = dynamodb.Table(config.USERS_TABLE)
categories_table = dynamodb.Table(config.CATEGORIES_TABLE)
products_table = dynamodb.Table(config.PRODUCTS_TABLE)
gift_tiers_table = dynamodb.Table(config.GIFT_TIERS_TABLE)

DEMO_PRODUCTS = [
    {
        'name': 'Magic Colour Changing Mug',
        'slug': 'magic-colour-changing-mug',
        'description': 'Reveals your photo when filled with a hot drink.',
        'price': 499.0,
        'sale_price': 399.0,
        'category': 'sublimation-mugs',
        'stock': 25,
    },
    {
        'name': 'Classic Wooden Photo Frame',
        'slug': 'classic-wooden-photo-frame',
        'description': 'Hand finished 8x10 frame with your favourite memory.',
        'price': 749.0,
        'category': 'frames',
        'stock': 12,
    },
    {
        'name': 'Engraved Name Keychain',
        'slug': 'engraved-name-keychain',
        'description': 'Metal keychain laser engraved with any name.',
        'price': 149.0,
        'category': 'keychains',
        'stock': 60,
        'delivery_charge': 20.0,
    },
    {
        'name': 'Insulated Steel Bottle',
        'slug': 'insulated-steel-bottle',
        'description': 'Keeps drinks cold for 24 hours. Printed with your text.',
        'price': 899.0,
        'category': 'bottles',
        'stock': 18,
    },
    {
        'name': 'Personalised Gift Hamper',
        'slug': 'personalised-gift-hamper',
        'description': 'A mug, a keychain and a greeting card in one box.',
        'price': 1499.0,
        'sale_price': 1299.0,
        'category': 'gift-items',
        'stock': 8,
    },
]


def _decimal(value):
    return Decimal(str(value))


def seed_data():
    print("Starting data seeding...")
    now = datetime.now(timezone.utc).isoformat()

    # 1. Categories
    print("\nSeeding Categories...")
    with categories_table.batch_writer() as batch:
        for category in DEFAULT_CATEGORIES:
            batch.put_item(Item=dict(category, created_at=now))
            print(f"  Processed Category: {category['slug']}")

    # 2. Products
    print("\nSeeding Products...")
    product_ids = {}
    with products_table.batch_writer() as batch:
        for product in DEMO_PRODUCTS:
            product_id = str(uuid.uuid4())
            product_ids[product['slug']] = product_id
            item = {
                'id': product_id,
                'name': product['name'],
                'slug': product['slug'],
                'description': product['description'],
                'price': _decimal(product['price']),
                'category': product['category'],
                'stock': int(product['stock']),
                'images': [],
                'likes': 0,
                'is_featured': True,
                'is_archived': False,
                'created_at': now,
            }
            if 'sale_price' in product:
                item['sale_price'] = _decimal(product['sale_price'])
            if 'delivery_charge' in product:
                item['delivery_charge'] = _decimal(product['delivery_charge'])
            batch.put_item(Item=item)
            print(f"  Processed Product: {product['name']}")

    # 3. Gift tiers: one linked to a product, one custom
    print("\nSeeding Gift Tiers...")
    with gift_tiers_table.batch_writer() as batch:
        batch.put_item(Item={
            'id': str(uuid.uuid4()),
            'threshold_amount': _decimal(1000),
            'product_id': product_ids['engraved-name-keychain'],
            'created_at': now,
        })
        batch.put_item(Item={
            'id': str(uuid.uuid4()),
            'threshold_amount': _decimal(2000),
            'gift_name': 'Surprise Chocolate Box',
            'gift_image_url': config.PLACEHOLDER_GIFT_IMAGE,
            'created_at': now,
        })

    # 4. Admin account; the password is the email, change it after first login
    print("\nSeeding Users...")
    users_table.put_item(Item={
        'email': config.ADMIN_EMAIL.lower(),
        'name': 'Administrator',
        'password': generate_password_hash(config.ADMIN_EMAIL.lower()),
        'created_at': now,
    })
    print(f"  Processed User: {config.ADMIN_EMAIL.lower()}")

    print("\nSeeding Complete!")


if __name__ == '__main__':
    seed_data()

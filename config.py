import os

# AWS Configuration
REGION = os.environ.get('AWS_DEFAULT_REGION', 'us-east-1')

USERS_TABLE = os.environ.get('USERS_TABLE', 'GiftCenter_Users')
CATEGORIES_TABLE = os.environ.get('CATEGORIES_TABLE', 'GiftCenter_Categories')
PRODUCTS_TABLE = os.environ.get('PRODUCTS_TABLE', 'GiftCenter_Products')
ORDERS_TABLE = os.environ.get('ORDERS_TABLE', 'GiftCenter_Orders')
GIFT_TIERS_TABLE = os.environ.get('GIFT_TIERS_TABLE', 'GiftCenter_GiftTiers')
VENDORS_TABLE = os.environ.get('VENDORS_TABLE', 'GiftCenter_Vendors')

IMAGES_BUCKET = os.environ.get('IMAGES_BUCKET', 'giftcenter-product-images')

# Empty ARN disables notifications
SNS_TOPIC_ARN = os.environ.get('SNS_TOPIC_ARN', '')

SECRET_KEY = os.environ.get('SECRET_KEY', 'giftcenter-secret-key-2026')

ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin@giftcenter.example.com')
WHATSAPP_NUMBER = os.environ.get('WHATSAPP_NUMBER', '917470724553')

FREE_DELIVERY_THRESHOLD = float(os.environ.get('FREE_DELIVERY_THRESHOLD', '1000'))
DEFAULT_DELIVERY_CHARGE = float(os.environ.get('DEFAULT_DELIVERY_CHARGE', '40'))

DELIVERED_ORDER_RETENTION_DAYS = int(
    os.environ.get('DELIVERED_ORDER_RETENTION_DAYS', '30'))

PLACEHOLDER_GIFT_IMAGE = 'https://via.placeholder.com/150?text=Gift'

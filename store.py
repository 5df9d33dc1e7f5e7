"""Pass-through access to the hosted backend (DynamoDB, S3, SNS).

Every helper returns plain Python values: DynamoDB ``Decimal`` numbers are
converted on the way out and floats converted back on the way in.
"""
import logging
import os
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

import config
from catalog import DEFAULT_CATEGORIES, transform_product

logger = logging.getLogger(__name__)

ORDER_STATUSES = ('pending', 'processing', 'shipped', 'delivered', 'cancelled')
VENDOR_STATUSES = ('pending', 'approved', 'rejected', 'suspended')

_handles = {}


def reset_connections():
    _handles.clear()


def _dynamodb():
    if 'dynamodb' not in _handles:
        _handles['dynamodb'] = boto3.resource('dynamodb', region_name=config.REGION)
    return _handles['dynamodb']


def _client(service):
    if service not in _handles:
        _handles[service] = boto3.client(service, region_name=config.REGION)
    return _handles[service]


def table(name):
    return _dynamodb().Table(name)


def users_table():
    return table(config.USERS_TABLE)


def categories_table():
    return table(config.CATEGORIES_TABLE)


def products_table():
    return table(config.PRODUCTS_TABLE)


def orders_table():
    return table(config.ORDERS_TABLE)


def gift_tiers_table():
    return table(config.GIFT_TIERS_TABLE)


def vendors_table():
    return table(config.VENDORS_TABLE)


def now_iso():
    return datetime.now(timezone.utc).isoformat()


def to_plain(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def to_dynamo(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def _scan(tbl, **kwargs):
    # follow pagination so large tables are read completely
    response = tbl.scan(**kwargs)
    items = response.get('Items', [])
    while 'LastEvaluatedKey' in response:
        response = tbl.scan(ExclusiveStartKey=response['LastEvaluatedKey'], **kwargs)
        items.extend(response.get('Items', []))
    return [to_plain(i) for i in items]


def _get(tbl, key):
    response = tbl.get_item(Key=key)
    if 'Item' not in response:
        return None
    return to_plain(response['Item'])


def _update(tbl, key, updates):
    """SET every given attribute; a value of None REMOVEs the attribute."""
    if not updates:
        return
    set_parts = []
    remove_parts = []
    names = {}
    values = {}
    for k, v in updates.items():
        names[f"#{k}"] = k
        if v is None:
            remove_parts.append(f"#{k}")
        else:
            set_parts.append(f"#{k} = :{k}")
            values[f":{k}"] = to_dynamo(v)

    clauses = []
    if set_parts:
        clauses.append('SET ' + ', '.join(set_parts))
    if remove_parts:
        clauses.append('REMOVE ' + ', '.join(remove_parts))
    kwargs = {
        'Key': key,
        'UpdateExpression': ' '.join(clauses),
        'ExpressionAttributeNames': names,
    }
    # DynamoDB rejects an empty values map
    if values:
        kwargs['ExpressionAttributeValues'] = values
    tbl.update_item(**kwargs)


def send_notification(subject, message):
    if not config.SNS_TOPIC_ARN:
        return
    try:
        _client('sns').publish(
            TopicArn=config.SNS_TOPIC_ARN,
            Subject=subject,
            Message=message
        )
    except ClientError as e:
        logger.warning("Error sending notification %r: %s", subject, e)


# ==================== PROFILES ====================


def get_user(email):
    return _get(users_table(), {'email': email})


def create_user(email, name, password_hash):
    users_table().put_item(Item={
        'email': email,
        'name': name or '',
        'password': password_hash,
        'created_at': now_iso(),
    })


def list_users():
    users = _scan(users_table())
    for u in users:
        u.pop('password', None)
    return sorted(users, key=lambda u: u.get('created_at', ''), reverse=True)


def save_profile_address(email, form):
    _update(users_table(), {'email': email}, {
        'name': form.name,
        'phone': form.phone,
        'house_no': form.house_no,
        'street': form.street,
        'city': form.city,
        'state': form.state,
        'zip': form.zip,
        'updated_at': now_iso(),
    })


# ==================== CATEGORIES ====================


def list_categories():
    return sorted(_scan(categories_table()), key=lambda c: c.get('name', ''))


def categories_by_slug():
    return {c['slug']: c for c in list_categories()}


def get_category(slug):
    return _get(categories_table(), {'slug': slug})


def seed_categories():
    with categories_table().batch_writer() as batch:
        for category in DEFAULT_CATEGORIES:
            batch.put_item(Item=dict(category, created_at=now_iso()))
    return len(DEFAULT_CATEGORIES)


# ==================== PRODUCTS ====================


def list_product_rows():
    return _scan(products_table())


def list_products(include_archived=False):
    cats = categories_by_slug()
    products = [transform_product(r, cats) for r in list_product_rows()]
    if not include_archived:
        products = [p for p in products if not p['is_archived']]
    return sorted(products, key=lambda p: p.get('created_at', ''), reverse=True)


def products_by_id(include_archived=True):
    return {p['id']: p for p in list_products(include_archived=include_archived)}


def featured_products(limit=4):
    return [p for p in list_products() if p['is_featured']][:limit]


def products_in_category(slug):
    return [p for p in list_products() if p['category'] == slug]


def get_product_row(product_id):
    return _get(products_table(), {'id': str(product_id)})


def get_product(id_or_slug):
    """Look a product up by id, falling back to its slug."""
    row = get_product_row(id_or_slug)
    if row is None:
        matches = _scan(products_table(), FilterExpression=Attr('slug').eq(id_or_slug))
        row = matches[0] if matches else None
    if row is None:
        return None
    return transform_product(row, categories_by_slug())


def create_product(fields):
    product_id = str(uuid.uuid4())
    item = {
        'id': product_id,
        'likes': 0,
        'is_featured': True,
        'is_archived': False,
        'created_at': now_iso(),
    }
    item.update(fields)
    products_table().put_item(Item=to_dynamo(item))
    return product_id


def update_product(product_id, updates):
    _update(products_table(), {'id': str(product_id)}, updates)


def delete_product(product_id):
    products_table().delete_item(Key={'id': str(product_id)})


def adjust_likes(product_id, delta):
    response = products_table().update_item(
        Key={'id': str(product_id)},
        UpdateExpression='ADD likes :d',
        ExpressionAttributeValues={':d': delta},
        ReturnValues='UPDATED_NEW',
    )
    return int(response.get('Attributes', {}).get('likes', 0))


def liked_product_ids(email):
    user = get_user(email) or {}
    return set(user.get('liked_product_ids') or ())


def toggle_like(email, product_id):
    """Flip a user's like on a product; returns ``(liked, likes)``.

    Likes are kept as a string set on the user row so each user counts once
    per product across sessions.
    """
    product_id = str(product_id)
    liked = product_id in liked_product_ids(email)
    users_table().update_item(
        Key={'email': email},
        UpdateExpression=('DELETE' if liked else 'ADD') + ' liked_product_ids :p',
        ExpressionAttributeValues={':p': {product_id}},
    )
    likes = adjust_likes(product_id, -1 if liked else 1)
    return not liked, max(0, likes)


def vendor_products(vendor_id):
    return [p for p in list_products(include_archived=True) if p['vendor_id'] == vendor_id]


def upload_image(file_storage):
    """Upload one image to the products bucket and return its public URL."""
    _, ext = os.path.splitext(file_storage.filename or '')
    ext = ext.lstrip('.').lower() or 'jpg'
    key = f"{secrets.token_hex(6)}_{int(datetime.now(timezone.utc).timestamp() * 1000)}.{ext}"
    _client('s3').upload_fileobj(
        file_storage.stream,
        config.IMAGES_BUCKET,
        key,
        ExtraArgs={'ContentType': file_storage.mimetype or 'application/octet-stream'},
    )
    return f"https://{config.IMAGES_BUCKET}.s3.{config.REGION}.amazonaws.com/{key}"


def upload_images(files):
    return [upload_image(f) for f in files if f and f.filename]


# ==================== ORDERS ====================


def create_order(order):
    order_id = f"ORD-{int(datetime.now(timezone.utc).timestamp() * 1000)}-{secrets.token_hex(2)}"
    item = dict(order, id=order_id, status='pending', created_at=now_iso())
    orders_table().put_item(Item=to_dynamo(item))
    return order_id


def get_order(order_id):
    return _get(orders_table(), {'id': order_id})


def list_orders():
    return sorted(_scan(orders_table()), key=lambda o: o.get('created_at', ''), reverse=True)


def orders_for_user(email):
    orders = _scan(orders_table(), FilterExpression=Attr('user_email').eq(email))
    return sorted(orders, key=lambda o: o.get('created_at', ''), reverse=True)


def update_order_status(order_id, status):
    if status not in ORDER_STATUSES:
        raise ValueError(f"Invalid order status: {status}")
    if get_order(order_id) is None:
        raise LookupError(f"Order not found: {order_id}")
    _update(orders_table(), {'id': order_id}, {
        'status': status,
        'updated_at': now_iso(),
    })


def purge_old_delivered_orders(days=None):
    days = config.DELIVERED_ORDER_RETENTION_DAYS if days is None else days
    cutoff = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()
    stale = _scan(orders_table(), FilterExpression=Attr('status').eq('delivered'))
    removed = 0
    for order in stale:
        if (order.get('updated_at') or order.get('created_at', '')) < cutoff:
            orders_table().delete_item(Key={'id': order['id']})
            removed += 1
    if removed:
        logger.info("Purged %d delivered orders older than %d days", removed, days)
    return removed


# ==================== GIFT TIERS ====================


def list_gift_tiers():
    products = products_by_id()
    tiers = []
    for row in _scan(gift_tiers_table()):
        tier = dict(row)
        tier['threshold_amount'] = float(row.get('threshold_amount', 0))
        tier['product'] = products.get(str(row.get('product_id'))) if row.get('product_id') else None
        tiers.append(tier)
    return sorted(tiers, key=lambda t: t['threshold_amount'])


def create_gift_tier(threshold_amount, product_id=None, gift_name=None, gift_image_url=None):
    tier_id = str(uuid.uuid4())
    item = {
        'id': tier_id,
        'threshold_amount': Decimal(str(threshold_amount)),
        'created_at': now_iso(),
    }
    if product_id:
        item['product_id'] = str(product_id)
    else:
        item['gift_name'] = gift_name
        item['gift_image_url'] = gift_image_url
    gift_tiers_table().put_item(Item=item)
    return tier_id


def delete_gift_tier(tier_id):
    gift_tiers_table().delete_item(Key={'id': tier_id})


# ==================== VENDORS ====================


def create_vendor(user_email, shop_name, owner_name, phone_primary, address, pincode):
    vendor_id = str(uuid.uuid4())
    vendors_table().put_item(Item={
        'id': vendor_id,
        'user_email': user_email,
        'shop_name': shop_name,
        'owner_name': owner_name,
        'phone_primary': phone_primary,
        'address': address,
        'pincode': pincode,
        'status': 'pending',
        'product_limit': 0,
        'created_at': now_iso(),
    })
    return vendor_id


def get_vendor(vendor_id):
    return _get(vendors_table(), {'id': vendor_id})


def vendor_for_user(email):
    matches = _scan(vendors_table(), FilterExpression=Attr('user_email').eq(email))
    return matches[0] if matches else None


def list_vendors(statuses=None):
    vendors = _scan(vendors_table())
    if statuses:
        vendors = [v for v in vendors if v.get('status') in statuses]
    return sorted(vendors, key=lambda v: v.get('shop_name', '').lower())


def update_vendor(vendor_id, **updates):
    status = updates.get('status')
    if status is not None and status not in VENDOR_STATUSES:
        raise ValueError(f"Invalid vendor status: {status}")
    _update(vendors_table(), {'id': vendor_id}, updates)

"""Product catalog helpers: row mapping, form parsing, filtering and search."""
import math

from config import DEFAULT_DELIVERY_CHARGE

DEFAULT_CATEGORY = 'gift-items'

DEFAULT_CATEGORIES = [
    {'name': 'Gift Items', 'slug': 'gift-items', 'description': 'Unique gifts'},
    {'name': 'Sublimation Mugs', 'slug': 'sublimation-mugs',
     'description': 'Custom mugs'},
    {'name': 'Frames', 'slug': 'frames', 'description': 'Photo frames'},
    {'name': 'Keychains', 'slug': 'keychains',
     'description': 'Personalized keychains'},
    {'name': 'Bottles', 'slug': 'bottles', 'description': 'Custom bottles'},
]

SORT_OPTIONS = ('newest', 'price-asc', 'price-desc', 'name')


def _to_float(value, default=0.0):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def transform_product(row, categories_by_slug=None):
    """Map a stored product row to the shape templates and the cart use.

    A sale price only applies when it is lower than the list price; the list
    price is then kept as ``original_price``.
    """
    price = _to_float(row.get('price'))
    sale_price = row.get('sale_price')
    is_sale = sale_price is not None and _to_float(sale_price, price) < price

    category = row.get('category') or DEFAULT_CATEGORY
    category_name = category
    if categories_by_slug and category in categories_by_slug:
        category_name = categories_by_slug[category].get('name', category)

    stock = _to_int(row.get('stock'))
    return {
        'id': str(row.get('id')),
        'name': row.get('name', ''),
        'slug': row.get('slug', ''),
        'description': row.get('description') or '',
        'price': _to_float(sale_price) if is_sale else price,
        'original_price': price if is_sale else None,
        'category': category,
        'category_name': category_name,
        'images': list(row.get('images') or []),
        'stock': stock,
        'in_stock': stock > 0,
        'is_featured': bool(row.get('is_featured', False)),
        'is_archived': bool(row.get('is_archived', False)),
        'specifications': dict(row.get('specifications') or {}),
        'delivery_charge': _to_float(row.get('delivery_charge'))
        or DEFAULT_DELIVERY_CHARGE,
        'weight': _to_float(row.get('weight')),
        'vendor_id': row.get('vendor_id'),
        'likes': _to_int(row.get('likes')),
        'created_at': row.get('created_at', ''),
    }


def filter_products(products, min_price=None, max_price=None, in_stock_only=False):
    filtered = list(products)
    if min_price is not None:
        filtered = [p for p in filtered if p['price'] >= min_price]
    if max_price is not None:
        filtered = [p for p in filtered if p['price'] <= max_price]
    if in_stock_only:
        filtered = [p for p in filtered if p['in_stock']]
    return filtered


def sort_products(products, sort_by):
    products = list(products)
    if sort_by == 'price-asc':
        return sorted(products, key=lambda p: p['price'])
    if sort_by == 'price-desc':
        return sorted(products, key=lambda p: p['price'], reverse=True)
    if sort_by == 'name':
        return sorted(products, key=lambda p: p['name'].lower())
    if sort_by == 'newest':
        return sorted(products, key=lambda p: p.get('created_at', ''), reverse=True)
    return products


def search_products(products, query):
    q = (query or '').lower()
    return [
        p for p in products
        if q in p['name'].lower()
        or q in p['description'].lower()
        or q in p['category'].lower()
    ]


def related_products(product, products, limit=4):
    return [
        p for p in products
        if p['id'] != product['id'] and p['category'] == product['category']
    ][:limit]


def discount_percentage(original_price, current_price):
    if not original_price or original_price <= current_price:
        return 0
    return round((original_price - current_price) / original_price * 100)


def _amount(value, label, minimum=0.0, inclusive=True):
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number.")
    if not math.isfinite(amount):
        raise ValueError(f"{label} must be a finite number.")
    if amount < minimum or (not inclusive and amount == minimum):
        comparison = 'at least' if inclusive else 'greater than'
        raise ValueError(f"{label} must be {comparison} {minimum:g}.")
    return amount


def parse_product_form(form, editing=False):
    """Validate the admin/vendor product form into stored product fields.

    When editing, a blank sale price or delivery charge maps to None so the
    stored attribute is removed.
    """
    name = (form.get('name') or '').strip()
    if not name:
        raise ValueError('Product name is required.')
    category_slug = form.get('category') or ''
    if not category_slug:
        raise ValueError('Please select a category')

    try:
        stock = int(form.get('stock') or 0)
    except (TypeError, ValueError):
        raise ValueError('Stock must be a whole number.')
    if stock < 0:
        raise ValueError('Stock cannot be negative.')

    fields = {
        'name': name,
        'description': form.get('description', ''),
        'price': _amount(form.get('price'), 'Price', inclusive=False),
        'stock': stock,
        'category': category_slug,
    }
    for key, label in (('sale_price', 'Sale price'), ('delivery_charge', 'Delivery charge')):
        raw = (form.get(key) or '').strip()
        if raw:
            fields[key] = _amount(raw, label)
        elif editing:
            fields[key] = None
    return fields

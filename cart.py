"""Session cart operations and the gift-tier incentive calculation.

The cart lives in the Flask session as a list of lines::

    {'product_id': str, 'quantity': int, 'variants': dict or None}

Functions here never touch the session or the backend; they take and return
plain lists so routes can persist the result.
"""
from config import (DEFAULT_DELIVERY_CHARGE, FREE_DELIVERY_THRESHOLD,
                    PLACEHOLDER_GIFT_IMAGE)

DELIVERY_METHODS = ('pickup', 'delivery')
GIFT_TIER_STEP = 1000


class GiftTierError(ValueError):
    pass


def _same_line(line, product_id, variants):
    return line['product_id'] == product_id and (line.get('variants') or None) == (variants or None)


def add_item(lines, product_id, quantity=1, variants=None):
    if quantity <= 0:
        raise ValueError('Quantity must be positive.')
    product_id = str(product_id)
    new_lines = [dict(line) for line in lines]
    for line in new_lines:
        if _same_line(line, product_id, variants):
            line['quantity'] += quantity
            return new_lines
    new_lines.append({
        'product_id': product_id,
        'quantity': quantity,
        'variants': variants or None,
    })
    return new_lines


def remove_item(lines, product_id):
    product_id = str(product_id)
    return [dict(line) for line in lines if line['product_id'] != product_id]


def update_quantity(lines, product_id, quantity):
    if quantity <= 0:
        return remove_item(lines, product_id)
    product_id = str(product_id)
    new_lines = []
    for line in lines:
        line = dict(line)
        if line['product_id'] == product_id:
            line['quantity'] = quantity
        new_lines.append(line)
    return new_lines


def clear():
    return []


def price_lines(lines, products_by_id):
    """Join cart lines with display products.

    Returns ``(items, missing_ids)``; lines whose product is gone are not
    priced.
    """
    items = []
    missing = []
    for line in lines:
        product = products_by_id.get(str(line['product_id']))
        if product is None:
            missing.append(line['product_id'])
            continue
        quantity = int(line['quantity'])
        items.append({
            'product': product,
            'quantity': quantity,
            'variants': line.get('variants'),
            'subtotal': product['price'] * quantity,
        })
    return items, missing


def calculate_totals(items):
    total = sum(item['product']['price'] * item['quantity'] for item in items)
    item_count = sum(item['quantity'] for item in items)
    return total, item_count


def resolve_gift(total, tiers):
    """Return ``(unlocked, next_tier)`` for a cart total.

    The unlocked tier is the highest threshold reached; the next tier is the
    lowest one not yet reached.
    """
    unlocked = None
    next_tier = None
    for tier in sorted(tiers, key=lambda t: t['threshold_amount']):
        if total >= tier['threshold_amount']:
            unlocked = tier
        else:
            next_tier = tier
            break
    return unlocked, next_tier


def gift_name(tier):
    product = tier.get('product')
    if product:
        return product['name']
    return tier.get('gift_name')


def gift_image(tier):
    product = tier.get('product')
    if product:
        images = product.get('images') or []
        return images[0] if images else None
    return tier.get('gift_image_url')


def incentive_progress(total, unlocked, next_tier):
    if not unlocked and not next_tier:
        return None

    target = next_tier or unlocked
    threshold = target['threshold_amount']
    percent = min(total / threshold * 100, 100) if threshold > 0 else 100
    remaining = max(0, threshold - total)
    return {
        'percent': percent,
        'remaining': remaining,
        'target': threshold,
        'total': total,
        'gift_name': gift_name(target),
        'gift_image': gift_image(target),
        'unlocked': remaining <= 0,
    }


def delivery_fee(items, subtotal, method):
    if method != 'delivery':
        return 0
    if subtotal >= FREE_DELIVERY_THRESHOLD:
        return 0
    return sum(
        (item['product'].get('delivery_charge') or DEFAULT_DELIVERY_CHARGE)
        * item['quantity']
        for item in items
    )


def suggest_next_threshold(tiers):
    if not tiers:
        return GIFT_TIER_STEP
    return max(t['threshold_amount'] for t in tiers) + GIFT_TIER_STEP


def parse_gift_tier(form, products_by_id):
    """Validate the admin gift tier form; returns kwargs for the store."""
    try:
        threshold = float(form.get('threshold') or '')
    except ValueError:
        raise GiftTierError('Please enter a spending threshold.')
    if threshold <= 0:
        raise GiftTierError('Threshold must be greater than zero.')

    mode = form.get('mode', 'product')
    if mode == 'product':
        product_id = form.get('product_id')
        if not product_id:
            raise GiftTierError('Please select a product')
        if product_id not in products_by_id:
            raise GiftTierError('Selected product does not exist.')
        return {'threshold_amount': threshold, 'product_id': product_id}
    if mode == 'custom':
        name = (form.get('gift_name') or '').strip()
        if not name:
            raise GiftTierError('Please enter a gift name')
        return {
            'threshold_amount': threshold,
            'gift_name': name,
            'gift_image_url': (form.get('gift_image_url') or '').strip()
            or PLACEHOLDER_GIFT_IMAGE,
        }
    raise GiftTierError(f"Unknown gift mode: {mode}")

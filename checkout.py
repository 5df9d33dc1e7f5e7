import re
from dataclasses import dataclass
from urllib.parse import quote

from cart import DELIVERY_METHODS


class CheckoutError(ValueError):
    pass


@dataclass
class CheckoutForm:
    name: str = ''
    phone: str = ''
    house_no: str = ''
    street: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    delivery_method: str = 'pickup'

    @classmethod
    def from_form(cls, form):
        return cls(
            name=(form.get('name') or '').strip(),
            phone=(form.get('phone') or '').strip(),
            house_no=(form.get('house_no') or '').strip(),
            street=(form.get('street') or '').strip(),
            city=(form.get('city') or '').strip(),
            state=(form.get('state') or '').strip(),
            zip=(form.get('zip') or '').strip(),
            delivery_method=form.get('delivery_method') or 'pickup',
        )

    @classmethod
    def from_profile(cls, profile):
        return cls(
            name=profile.get('name', ''),
            phone=profile.get('phone', ''),
            house_no=profile.get('house_no', ''),
            street=profile.get('street', ''),
            city=profile.get('city', ''),
            state=profile.get('state', ''),
            zip=profile.get('zip', ''),
        )

    @property
    def is_delivery(self):
        return self.delivery_method == 'delivery'

    def validate(self):
        if self.delivery_method not in DELIVERY_METHODS:
            raise CheckoutError(f"Unknown delivery method: {self.delivery_method}")
        if not self.name or not self.phone:
            raise CheckoutError('Name and phone are required.')
        if self.is_delivery:
            missing = [f for f in ('house_no', 'street', 'city', 'state', 'zip')
                       if not getattr(self, f)]
            if missing:
                raise CheckoutError(
                    'Address is incomplete: ' + ', '.join(missing) + '.')


def full_address(form):
    if not form.is_delivery:
        return 'Pickup from Shop'
    return f"{form.house_no}, {form.street}, {form.city}, {form.state} - {form.zip}"


def build_whatsapp_message(form, items, gift_name, subtotal, delivery, total):
    lines = [
        '*New Order Placed!* 🛍️',
        '',
        '*Customer Details:*',
        f"Name: {form.name}",
        f"Phone: {form.phone}",
    ]
    if form.is_delivery:
        lines.append(f"Address: {full_address(form)}")
    else:
        lines.append('*PICKUP FROM SHOP* 🏪')

    lines.append('')
    lines.append('*Order Items:*')
    for item in items:
        lines.append(f"- {item['product']['name']} (x{item['quantity']})")
    if gift_name:
        lines.append(f"🎁 FREE GIFT: {gift_name}")

    lines.append('')
    lines.append('----------------')
    lines.append(f"Subtotal: ₹{subtotal:.2f}")
    if form.is_delivery:
        fee = 'FREE' if delivery == 0 else f"₹{delivery:.2f}"
        lines.append(f"Delivery Fee: {fee}")
    lines.append(f"*Total Amount: ₹{total:.2f}*")
    return '\n'.join(lines)


def whatsapp_url(number, message):
    digits = re.sub(r'\D+', '', str(number or ''))
    return f"https://wa.me/{digits}?text={quote(message)}"

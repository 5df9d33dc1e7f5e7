from flask import Flask, render_template, request, redirect, url_for, session, flash, jsonify, abort
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timezone
from functools import wraps
import logging

from botocore.exceptions import ClientError

import cart as cart_ops
import config
import store
from catalog import (SORT_OPTIONS, discount_percentage, filter_products,
                     parse_product_form, related_products, search_products,
                     sort_products)
from checkout import (CheckoutError, CheckoutForm, build_whatsapp_message,
                      full_address, whatsapp_url)
from formatting import create_slug, register_filters
from vendors import (VendorError, check_application, check_can_add_product,
                     parse_limit, toggled_status)

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s %(name)s %(levelname)s %(message)s')
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
register_filters(app)


def is_admin_email(email):
    return bool(email) and bool(config.ADMIN_EMAIL) and \
        email.lower() == config.ADMIN_EMAIL.lower()


def current_user():
    return session.get('user')


def admin_required(view):
    # checked on every request against the configured admin email
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if not user:
            return redirect(url_for('admin_login'))
        if not is_admin_email(user.get('email')):
            logger.warning("Non-admin user %s attempted to access %s",
                           user.get('email'), request.path)
            return redirect(url_for('admin_login',
                                    error='Unauthorized: You are not an administrator.'))
        return view(*args, **kwargs)
    return wrapped


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user():
            flash('Please sign in.', 'error')
            return redirect(url_for('auth_page', next=request.path))
        return view(*args, **kwargs)
    return wrapped


def _cart_lines():
    return session.get('cart', [])


def _save_cart(lines):
    session['cart'] = lines


def _cart_state(delivery_method='pickup', notify=True):
    """Price the session cart and work out the gift incentive.

    Lines whose product is gone are dropped; ``notify`` flashes a message for
    each, which only HTML views should ask for.
    """
    items, missing = cart_ops.price_lines(_cart_lines(), store.products_by_id())
    if notify:
        for product_id in missing:
            flash(f"Item with id {product_id} is no longer available and was removed.", 'info')
    if missing:
        _save_cart([line for line in _cart_lines() if line['product_id'] not in missing])

    subtotal, item_count = cart_ops.calculate_totals(items)
    unlocked, next_tier = cart_ops.resolve_gift(subtotal, store.list_gift_tiers())
    delivery = cart_ops.delivery_fee(items, subtotal, delivery_method)
    return {
        'items': items,
        'subtotal': subtotal,
        'item_count': item_count,
        'delivery_method': delivery_method,
        'delivery': delivery,
        'total': subtotal + delivery,
        'unlocked_gift': unlocked,
        'next_gift': next_tier,
        'progress': cart_ops.incentive_progress(subtotal, unlocked, next_tier),
    }


def _tier_summary(tier):
    if not tier:
        return None
    return {
        'id': tier['id'],
        'threshold_amount': tier['threshold_amount'],
        'gift_name': cart_ops.gift_name(tier),
        'gift_image': cart_ops.gift_image(tier),
    }


@app.context_processor
def cart_context():
    lines = session.get('cart', [])
    user = session.get('user') or {}
    return {
        'cart_count': sum(int(line.get('quantity', 0)) for line in lines),
        'liked_ids': set(session.get('liked', [])),
        'is_admin': is_admin_email(user.get('email')),
    }

# ==================== PUBLIC ROUTES ====================


@app.route('/')
def index():
    try:
        featured = store.featured_products()
        categories = store.list_categories()
    except ClientError as e:
        logger.error("Error loading home page: %s", e)
        flash('Could not load products right now.', 'error')
        featured, categories = [], []
    return render_template('index.html', user=current_user(), featured=featured, categories=categories)


@app.route('/products')
def products():
    products_list = store.list_products()
    query = request.args.get('q', '').strip()
    if query:
        products_list = search_products(products_list, query)
    return render_template('products.html', user=current_user(), products=products_list, query=query)


def _float_arg(name):
    value = request.args.get(name)
    if value in (None, ''):
        return None
    try:
        return float(value)
    except ValueError:
        return None


@app.route('/categories/<slug>')
def category(slug):
    category_row = store.get_category(slug)
    if not category_row:
        abort(404)

    sort_by = request.args.get('sort', 'newest')
    if sort_by not in SORT_OPTIONS:
        sort_by = 'newest'
    min_price = _float_arg('min_price')
    max_price = _float_arg('max_price')
    in_stock = request.args.get('in_stock') in ('1', 'true', 'on')

    products_list = filter_products(store.products_in_category(slug),
                                    min_price=min_price, max_price=max_price,
                                    in_stock_only=in_stock)
    products_list = sort_products(products_list, sort_by)

    filters = {'sort': sort_by, 'min_price': min_price,
               'max_price': max_price, 'in_stock': in_stock}
    return render_template('category.html', user=current_user(), category=category_row,
                           products=products_list, filters=filters, sort_options=SORT_OPTIONS)


@app.route('/products/<product_ref>')
def product_detail(product_ref):
    product = store.get_product(product_ref)
    if not product or product['is_archived']:
        abort(404)

    related = related_products(product, store.products_in_category(product['category']))
    discount = discount_percentage(product['original_price'], product['price'])
    return render_template('product.html', user=current_user(), product=product,
                           related=related, discount=discount)


@app.route('/products/<product_id>/like', methods=['POST'])
def toggle_like(product_id):
    user = current_user()
    if not user:
        return jsonify({'error': 'Please sign in'}), 401

    if store.get_product_row(product_id) is None:
        return jsonify({'error': 'Product not found'}), 404

    added, likes = store.toggle_like(user['email'], product_id)
    session['liked'] = sorted(store.liked_product_ids(user['email']))
    return jsonify({'liked': added, 'likes': likes})

# ==================== ACCOUNT ROUTES ====================


@app.route('/auth')
def auth_page():
    return render_template('auth.html', next=request.args.get('next', ''))


@app.route('/signup', methods=['POST'])
def signup():
    name = request.form.get('name')
    email = (request.form.get('email') or '').strip().lower()
    password = request.form.get('password')

    if not email or not password:
        flash('Email and password are required.', 'error')
        return redirect(url_for('auth_page'))

    if store.get_user(email):
        flash('User already exists!', 'error')
        return redirect(url_for('auth_page'))

    store.create_user(email, name, generate_password_hash(password))
    store.send_notification("New User Signup", f"User {name} ({email}) signed up.")

    flash('Account created successfully. Please sign in.', 'success')
    return redirect(url_for('auth_page'))


@app.route('/login', methods=['POST'])
def login():
    email = (request.form.get('email') or '').strip().lower()
    password = request.form.get('password') or ''
    next_url = request.form.get('next') or ''

    user = store.get_user(email) if email else None
    if user and check_password_hash(user.get('password', ''), password):
        session['user'] = {
            'email': email,
            'name': user.get('name', ''),
        }
        session['liked'] = sorted(user.get('liked_product_ids') or ())
        flash('Logged in successfully.', 'success')

        if is_admin_email(email):
            return redirect(url_for('admin_dashboard'))
        if next_url.startswith('/') and not next_url.startswith('//'):
            return redirect(next_url)
        return redirect(url_for('index'))

    flash('Invalid credentials.', 'error')
    return redirect(url_for('auth_page', next=next_url))


@app.route('/logout')
def logout():
    session.pop('user', None)
    session.pop('liked', None)
    flash('Logged out successfully.', 'success')
    return redirect(url_for('index'))


@app.route('/profile')
@login_required
def profile():
    user = current_user()
    profile_row = store.get_user(user['email']) or {}
    profile_row.pop('password', None)
    orders_list = store.orders_for_user(user['email'])
    return render_template('profile.html', user=user, profile=profile_row, orders=orders_list)


@app.route('/orders')
@login_required
def orders():
    user = current_user()
    try:
        store.purge_old_delivered_orders()
    except ClientError as e:
        logger.warning("Delivered order cleanup failed: %s", e)

    orders_list = store.orders_for_user(user['email'])
    return render_template('orders.html', user=user, orders=orders_list)

# ==================== CART ROUTES ====================


@app.route('/cart')
def view_cart():
    state = _cart_state()
    return render_template('cart.html', user=current_user(), cart=state)


@app.route('/api/cart')
def cart_api():
    state = _cart_state(request.args.get('delivery_method', 'pickup'), notify=False)
    return jsonify({
        'items': [{
            'product_id': i['product']['id'],
            'name': i['product']['name'],
            'price': i['product']['price'],
            'quantity': i['quantity'],
            'variants': i['variants'],
            'subtotal': i['subtotal'],
        } for i in state['items']],
        'item_count': state['item_count'],
        'subtotal': state['subtotal'],
        'delivery': state['delivery'],
        'total': state['total'],
        'unlocked_gift': _tier_summary(state['unlocked_gift']),
        'next_gift': _tier_summary(state['next_gift']),
        'progress': state['progress'],
    })


def _request_data():
    return request.get_json(silent=True) or request.form


@app.route('/cart/add/<product_id>', methods=['POST'])
def add_to_cart(product_id):
    product = store.get_product_row(product_id)
    if not product or product.get('is_archived'):
        return jsonify({'error': 'Product not found'}), 404

    data = _request_data()
    try:
        quantity = int(data.get('quantity', 1))
    except (TypeError, ValueError):
        return jsonify({'error': 'Quantity must be a number'}), 400
    variants = data.get('variants') if isinstance(data.get('variants'), dict) else None

    try:
        lines = cart_ops.add_item(_cart_lines(), product_id, quantity, variants)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    _save_cart(lines)

    cart_count = sum(line['quantity'] for line in lines)
    return jsonify({'success': True, 'count': cart_count})


@app.route('/cart/update/<product_id>', methods=['POST'])
def update_cart(product_id):
    data = _request_data()
    raw_qty = data.get('qty', data.get('quantity'))
    if raw_qty is None:
        return jsonify({'error': 'Quantity is required'}), 400
    try:
        qty = int(raw_qty)
    except (TypeError, ValueError):
        return jsonify({'error': 'Quantity must be a number'}), 400

    lines = cart_ops.update_quantity(_cart_lines(), product_id, qty)
    _save_cart(lines)
    return jsonify({'success': True, 'count': sum(line['quantity'] for line in lines)})


@app.route('/cart/remove/<product_id>', methods=['POST'])
def remove_from_cart(product_id):
    lines = cart_ops.remove_item(_cart_lines(), product_id)
    _save_cart(lines)
    return jsonify({'success': True, 'count': sum(line['quantity'] for line in lines)})


@app.route('/cart/clear', methods=['POST'])
def clear_cart():
    _save_cart(cart_ops.clear())
    return jsonify({'success': True, 'count': 0})

# ==================== CHECKOUT ROUTES ====================


@app.route('/checkout', methods=['GET', 'POST'])
@login_required
def checkout():
    user = current_user()
    if not _cart_lines():
        flash('Your cart is empty.', 'error')
        return redirect(url_for('view_cart'))

    if request.method == 'GET':
        profile_row = store.get_user(user['email']) or {}
        form = CheckoutForm.from_profile(profile_row)
        form.delivery_method = request.args.get('delivery_method', 'pickup')
        if form.delivery_method not in cart_ops.DELIVERY_METHODS:
            form.delivery_method = 'pickup'
        state = _cart_state(form.delivery_method)
        return render_template('checkout.html', user=user, form=form, cart=state)

    form = CheckoutForm.from_form(request.form)
    try:
        form.validate()
    except CheckoutError as e:
        flash(str(e), 'error')
        return redirect(url_for('checkout', delivery_method=form.delivery_method))

    state = _cart_state(form.delivery_method)
    if not state['items']:
        flash('Your cart is empty.', 'error')
        return redirect(url_for('view_cart'))

    for item in state['items']:
        if item['quantity'] > item['product']['stock']:
            flash(f"Not enough stock for '{item['product']['name']}'", 'error')
            return redirect(url_for('view_cart'))

    gift = state['unlocked_gift']
    gift_name = cart_ops.gift_name(gift) if gift else None
    gift_image = cart_ops.gift_image(gift) if gift else None

    try:
        if form.is_delivery:
            store.save_profile_address(user['email'], form)

        order_id = store.create_order({
            'user_email': user['email'],
            'customer_name': form.name,
            'customer_email': user['email'],
            'customer_phone': form.phone,
            'customer_address': full_address(form),
            'delivery_method': form.delivery_method,
            'items': [{
                'product_id': i['product']['id'],
                'name': i['product']['name'],
                'image': (i['product']['images'] or [None])[0],
                'quantity': i['quantity'],
                'price_at_time': i['product']['price'],
                'variants': i['variants'],
            } for i in state['items']],
            'subtotal': state['subtotal'],
            'delivery_fee': state['delivery'],
            'total_price': state['total'],
            'gift_name': gift_name,
            'gift_image_url': gift_image,
        })

        for item in state['items']:
            store.update_product(item['product']['id'], {
                'stock': max(0, item['product']['stock'] - item['quantity'])
            })
    except ClientError as e:
        logger.error("Checkout error for %s: %s", user['email'], e)
        flash('An unexpected error occurred. Please try again.', 'error')
        return redirect(url_for('checkout', delivery_method=form.delivery_method))

    message = build_whatsapp_message(form, state['items'], gift_name,
                                     state['subtotal'], state['delivery'], state['total'])
    link = whatsapp_url(config.WHATSAPP_NUMBER, message)

    store.send_notification(
        "New Order", f"Order {order_id} placed by {user['email']} for ₹{state['total']:.2f}")

    _save_cart(cart_ops.clear())
    return render_template('checkout_success.html', user=user, order_id=order_id, whatsapp_url=link)


@app.route('/confirmation')
def confirmation():
    return render_template('confirmation.html', user=current_user())

# ==================== PARTNER ROUTES ====================


@app.route('/partner-registration', methods=['GET', 'POST'])
@login_required
def partner_registration():
    user = current_user()
    existing = store.vendor_for_user(user['email'])

    if request.method == 'POST':
        fields = {k: (request.form.get(k) or '').strip()
                  for k in ('shop_name', 'owner_name', 'phone_primary', 'address', 'pincode')}
        try:
            check_application(existing)
            missing = [k for k, v in fields.items() if not v]
            if missing:
                raise VendorError('Please fill in: ' + ', '.join(missing) + '.')
        except VendorError as e:
            flash(f"Error submitting application: {e}", 'error')
            return redirect(url_for('partner_registration'))

        store.create_vendor(user['email'], **fields)
        store.send_notification("New Vendor Application",
                                f"{fields['shop_name']} ({user['email']}) applied to sell.")
        flash('Application submitted successfully! Please wait for admin approval.', 'success')
        return redirect(url_for('index'))

    return render_template('partner_registration.html', user=user, vendor=existing)


@app.route('/vendor/products')
@login_required
def vendor_products():
    user = current_user()
    vendor = store.vendor_for_user(user['email'])
    if not vendor or vendor.get('status') != 'approved':
        flash('Access denied. Approved shop required.', 'error')
        return redirect(url_for('partner_registration'))

    products_list = store.vendor_products(vendor['id'])
    return render_template('vendor_products.html', user=user, vendor=vendor, products=products_list)


def _new_slug(name):
    return f"{create_slug(name)}-{str(int(datetime.now(timezone.utc).timestamp() * 1000))[-6:]}"


@app.route('/vendor/products/add', methods=['GET', 'POST'])
@login_required
def vendor_add_product():
    user = current_user()
    vendor = store.vendor_for_user(user['email'])
    try:
        check_can_add_product(vendor, len(store.vendor_products(vendor['id'])) if vendor else 0)
    except VendorError as e:
        flash(str(e), 'error')
        return redirect(url_for('vendor_products') if vendor else url_for('partner_registration'))

    if request.method == 'POST':
        try:
            fields = parse_product_form(request.form)
        except ValueError as e:
            flash(f"Invalid product: {e}", 'error')
            return redirect(url_for('vendor_add_product'))

        fields['slug'] = _new_slug(fields['name'])
        fields['vendor_id'] = vendor['id']
        try:
            fields['images'] = store.upload_images(request.files.getlist('images'))
            store.create_product(fields)
        except ClientError as e:
            logger.error("Vendor %s product upload failed: %s", vendor['id'], e)
            flash('Failed to add product.', 'error')
            return redirect(url_for('vendor_add_product'))

        flash('Product added successfully!', 'success')
        return redirect(url_for('vendor_products'))

    return render_template('product_form.html', user=user, product=None,
                           categories=store.list_categories(),
                           action=url_for('vendor_add_product'))


@app.route('/vendor/products/<product_id>/delete', methods=['POST'])
@login_required
def vendor_delete_product(product_id):
    user = current_user()
    vendor = store.vendor_for_user(user['email'])
    product = store.get_product_row(product_id)
    if not product:
        flash('Product not found.', 'error')
        return redirect(url_for('vendor_products'))
    if not vendor or product.get('vendor_id') != vendor['id']:
        flash('You are not authorized to delete this product.', 'error')
        return redirect(url_for('vendor_products'))

    store.delete_product(product_id)
    flash('Product deleted successfully.', 'success')
    return redirect(url_for('vendor_products'))

# ==================== ADMIN ROUTES ====================


@app.route('/admin/login')
def admin_login():
    return render_template('admin_login.html', error=request.args.get('error'))


@app.route('/admin')
@app.route('/admin/dashboard')
@admin_required
def admin_dashboard():
    users = store.list_users()
    all_orders = store.list_orders()
    all_products = store.list_product_rows()

    today = datetime.now(timezone.utc).date().isoformat()
    stats = {
        'users': len(users),
        'orders': len(all_orders),
        'products': len(all_products),
        'orders_today': sum(1 for o in all_orders if o.get('created_at', '').startswith(today)),
        'revenue': round(sum(float(o.get('total_price', 0) or 0) for o in all_orders), 2),
    }
    return render_template('admin_dashboard.html', user=current_user(), stats=stats,
                           recent_users=users[:5])


@app.route('/admin/users')
@admin_required
def admin_users():
    all_orders = store.list_orders()
    users = []
    for u in store.list_users():
        u['orders'] = sum(1 for o in all_orders if o.get('user_email') == u['email'])
        users.append(u)
    return render_template('admin_users.html', user=current_user(), users=users)


@app.route('/admin/orders')
@admin_required
def admin_orders():
    orders_list = store.list_orders()
    status_filter = request.args.get('status', 'all')
    if status_filter != 'all':
        orders_list = [o for o in orders_list if o.get('status') == status_filter]
    return render_template('admin_orders.html', user=current_user(), orders=orders_list,
                           statuses=store.ORDER_STATUSES, status_filter=status_filter)


@app.route('/admin/order/<order_id>/status', methods=['POST'])
@admin_required
def admin_update_order_status(order_id):
    new_status = request.form.get('status', '')
    try:
        store.update_order_status(order_id, new_status)
    except (ValueError, LookupError) as e:
        flash(f"Error updating: {e}", 'error')
        return redirect(url_for('admin_orders'))
    except ClientError as e:
        logger.error("Error updating order %s status: %s", order_id, e)
        flash('Failed to update order status.', 'error')
        return redirect(url_for('admin_orders'))

    flash('Order status updated.', 'success')
    return redirect(url_for('admin_orders'))


@app.route('/admin/products')
@admin_required
def admin_products():
    products_list = store.list_products(include_archived=True)
    return render_template('admin_products.html', user=current_user(), products=products_list)


@app.route('/admin/products/add', methods=['GET', 'POST'])
@admin_required
def admin_add_product():
    categories = store.list_categories()
    if request.method == 'POST':
        try:
            fields = parse_product_form(request.form)
        except ValueError as e:
            flash(f"Failed to add product: {e}", 'error')
            return redirect(url_for('admin_add_product'))

        fields['slug'] = _new_slug(fields['name'])
        try:
            fields['images'] = store.upload_images(request.files.getlist('images'))
            store.create_product(fields)
        except ClientError as e:
            logger.error("Error adding product %r: %s", fields['name'], e)
            flash('Failed to add product.', 'error')
            return redirect(url_for('admin_add_product'))

        flash('Product added successfully!', 'success')
        return redirect(url_for('admin_products'))

    return render_template('product_form.html', user=current_user(), product=None,
                           categories=categories, action=url_for('admin_add_product'))


@app.route('/admin/products/<product_id>/edit', methods=['GET', 'POST'])
@admin_required
def admin_edit_product(product_id):
    row = store.get_product_row(product_id)
    if not row:
        flash('Product not found.', 'error')
        return redirect(url_for('admin_products'))

    if request.method == 'POST':
        try:
            updates = parse_product_form(request.form, editing=True)
        except ValueError as e:
            flash(f"Failed to update product: {e}", 'error')
            return redirect(url_for('admin_edit_product', product_id=product_id))

        kept = [url for url in request.form.getlist('keep_images') if url in (row.get('images') or [])]
        try:
            updates['images'] = kept + store.upload_images(request.files.getlist('images'))
            updates['is_archived'] = bool(request.form.get('is_archived'))
            updates['is_featured'] = bool(request.form.get('is_featured'))
            store.update_product(product_id, updates)
        except ClientError as e:
            logger.error("Error updating product %s: %s", product_id, e)
            flash('Failed to update product.', 'error')
            return redirect(url_for('admin_edit_product', product_id=product_id))

        flash('Product updated successfully!', 'success')
        return redirect(url_for('admin_products'))

    return render_template('product_form.html', user=current_user(), product=row,
                           categories=store.list_categories(),
                           action=url_for('admin_edit_product', product_id=product_id))


@app.route('/admin/products/<product_id>/delete', methods=['POST'])
@admin_required
def admin_delete_product(product_id):
    store.delete_product(product_id)
    flash('Product deleted successfully.', 'success')
    next_url = request.form.get('next') or ''
    if next_url.startswith('/') and not next_url.startswith('//'):
        return redirect(next_url)
    return redirect(url_for('admin_products'))


@app.route('/admin/products/global')
@admin_required
def admin_global_products():
    shops = {v['id']: v.get('shop_name', '') for v in store.list_vendors()}
    products_list = store.list_products(include_archived=True)
    for p in products_list:
        p['shop_name'] = shops.get(p['vendor_id'], '')

    search = request.args.get('search', '').strip().lower()
    if search:
        products_list = [p for p in products_list
                         if search in p['name'].lower() or search in p['shop_name'].lower()]
    return render_template('admin_global_products.html', user=current_user(),
                           products=products_list, search=search)


@app.route('/admin/categories/seed', methods=['POST'])
@admin_required
def admin_seed_categories():
    try:
        count = store.seed_categories()
    except ClientError as e:
        logger.error("Failed to seed categories: %s", e)
        flash('Failed to seed categories.', 'error')
    else:
        flash(f"Categories seeded successfully! ({count})", 'success')
    return redirect(url_for('admin_add_product'))


@app.route('/admin/gifts', methods=['GET', 'POST'])
@admin_required
def admin_gifts():
    if request.method == 'POST':
        try:
            tier = cart_ops.parse_gift_tier(request.form, store.products_by_id())
            store.create_gift_tier(**tier)
        except cart_ops.GiftTierError as e:
            flash(f"Error adding tier: {e}", 'error')
        else:
            flash('Gift tier added.', 'success')
        return redirect(url_for('admin_gifts'))

    tiers = store.list_gift_tiers()
    products_list = sorted(store.list_products(), key=lambda p: p['name'])
    return render_template('admin_gifts.html', user=current_user(), tiers=tiers,
                           products=products_list,
                           suggested=cart_ops.suggest_next_threshold(tiers))


@app.route('/admin/gifts/<tier_id>/delete', methods=['POST'])
@admin_required
def admin_delete_gift(tier_id):
    store.delete_gift_tier(tier_id)
    flash('Gift tier removed.', 'success')
    return redirect(url_for('admin_gifts'))


@app.route('/admin/vendors')
@admin_required
def admin_vendors():
    pending = store.list_vendors(statuses=('pending',))
    return render_template('admin_vendors.html', user=current_user(), vendors=pending)


@app.route('/admin/vendors/<vendor_id>/approve', methods=['POST'])
@admin_required
def admin_approve_vendor(vendor_id):
    vendor = store.get_vendor(vendor_id)
    if not vendor:
        flash('Vendor not found.', 'error')
        return redirect(url_for('admin_vendors'))
    try:
        limit = parse_limit(request.form.get('product_limit', 10))
    except VendorError as e:
        flash(str(e), 'error')
        return redirect(url_for('admin_vendors'))

    store.update_vendor(vendor_id, status='approved', product_limit=limit)
    store.send_notification("Vendor Approved", f"{vendor.get('shop_name')} was approved.")
    flash(f"{vendor.get('shop_name')} approved.", 'success')
    return redirect(url_for('admin_vendors'))


@app.route('/admin/vendors/<vendor_id>/reject', methods=['POST'])
@admin_required
def admin_reject_vendor(vendor_id):
    vendor = store.get_vendor(vendor_id)
    if not vendor:
        flash('Vendor not found.', 'error')
        return redirect(url_for('admin_vendors'))

    store.update_vendor(vendor_id, status='rejected')
    flash(f"{vendor.get('shop_name')} rejected.", 'success')
    return redirect(url_for('admin_vendors'))


@app.route('/admin/vendors/active')
@admin_required
def admin_active_vendors():
    vendors_list = store.list_vendors(statuses=('approved', 'suspended'))
    return render_template('admin_active_vendors.html', user=current_user(), vendors=vendors_list)


@app.route('/admin/vendors/<vendor_id>/toggle-ban', methods=['POST'])
@admin_required
def admin_toggle_vendor_ban(vendor_id):
    vendor = store.get_vendor(vendor_id)
    if not vendor:
        flash('Vendor not found.', 'error')
        return redirect(url_for('admin_active_vendors'))
    try:
        new_status = toggled_status(vendor.get('status'))
    except VendorError as e:
        flash(str(e), 'error')
        return redirect(url_for('admin_active_vendors'))

    store.update_vendor(vendor_id, status=new_status)
    store.send_notification("Vendor Status Changed",
                            f"{vendor.get('shop_name')} is now {new_status}.")
    flash(f"{vendor.get('shop_name')} is now {new_status}.", 'success')
    return redirect(url_for('admin_active_vendors'))


@app.route('/admin/vendors/<vendor_id>/limit', methods=['POST'])
@admin_required
def admin_update_vendor_limit(vendor_id):
    if not store.get_vendor(vendor_id):
        flash('Vendor not found.', 'error')
        return redirect(url_for('admin_active_vendors'))
    try:
        limit = parse_limit(request.form.get('product_limit'))
    except VendorError as e:
        flash(str(e), 'error')
        return redirect(url_for('admin_active_vendors'))

    store.update_vendor(vendor_id, product_limit=limit)
    flash('Product limit updated.', 'success')
    return redirect(url_for('admin_active_vendors'))


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000, debug=True)

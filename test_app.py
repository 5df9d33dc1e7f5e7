import io
from urllib.parse import parse_qs, urlparse

import boto3
from werkzeug.security import generate_password_hash

import config
import store
from conftest import sign_in


def location(resp):
    return urlparse(resp.headers['Location']).path


# ==================== STOREFRONT ====================


def test_home_lists_featured_products_and_categories(client, mug):
    resp = client.get('/')
    assert resp.status_code == 200
    assert b'Photo Mug' in resp.data
    assert b'Sublimation Mugs' in resp.data


def test_category_page_filters(client, mug, frame):
    resp = client.get('/categories/frames')
    assert resp.status_code == 200
    assert b'Wooden Frame' in resp.data
    assert b'Photo Mug' not in resp.data

    resp = client.get('/categories/sublimation-mugs?max_price=100')
    assert b'Photo Mug' not in resp.data

    assert client.get('/categories/nope').status_code == 404


def test_product_detail_by_slug_or_id(client, frame):
    resp = client.get('/products/wooden-frame')
    assert resp.status_code == 200
    assert b'14% off' in resp.data

    assert client.get(f"/products/{frame['id']}").status_code == 200
    assert client.get('/products/missing').status_code == 404


def test_archived_product_is_hidden(client, mug):
    store.update_product(mug['id'], {'is_archived': True})
    assert client.get('/products/photo-mug').status_code == 404
    assert b'Photo Mug' not in client.get('/products').data


def test_search(client, mug, frame):
    resp = client.get('/products?q=frame')
    assert b'Wooden Frame' in resp.data
    assert b'Photo Mug' not in resp.data


def test_like_toggle(client, mug):
    assert client.post(f"/products/{mug['id']}/like").status_code == 401

    sign_in(client, 'fan@example.com')
    assert client.post('/products/missing/like').status_code == 404
    assert client.post(f"/products/{mug['id']}/like").get_json() == {'liked': True, 'likes': 1}
    assert client.post(f"/products/{mug['id']}/like").get_json() == {'liked': False, 'likes': 0}


def test_like_counts_once_per_user_across_sessions(client, mug):
    store.create_user('fan@example.com', 'Fan', generate_password_hash('pw'))
    client.post('/login', data={'email': 'fan@example.com', 'password': 'pw'})
    assert client.post(f"/products/{mug['id']}/like").get_json() == {'liked': True, 'likes': 1}

    client.get('/logout')
    client.post('/login', data={'email': 'fan@example.com', 'password': 'pw'})
    with client.session_transaction() as sess:
        assert sess['liked'] == [mug['id']]
    assert b'Unlike' in client.get('/products/photo-mug').data

    assert client.post(f"/products/{mug['id']}/like").get_json() == {'liked': False, 'likes': 0}
    assert store.liked_product_ids('fan@example.com') == set()

    sign_in(client, 'other@example.com')
    client.post(f"/products/{mug['id']}/like")
    assert store.get_product(mug['id'])['likes'] == 1


# ==================== ACCOUNTS ====================


def test_signup_then_login(client):
    client.post('/signup', data={'name': 'Asha', 'email': 'Asha@Example.com', 'password': 'pw'})
    assert store.get_user('asha@example.com')['name'] == 'Asha'

    resp = client.post('/signup', data={'name': 'Again', 'email': 'asha@example.com', 'password': 'x'})
    assert location(resp) == '/auth'

    resp = client.post('/login', data={'email': 'asha@example.com', 'password': 'wrong'})
    assert location(resp) == '/auth'

    resp = client.post('/login', data={'email': 'asha@example.com', 'password': 'pw', 'next': '/orders'})
    assert location(resp) == '/orders'
    with client.session_transaction() as sess:
        assert sess['user'] == {'email': 'asha@example.com', 'name': 'Asha'}


def test_login_ignores_offsite_next(client):
    store.create_user('asha@example.com', 'Asha', generate_password_hash('pw'))
    resp = client.post('/login', data={'email': 'asha@example.com', 'password': 'pw',
                                       'next': '//evil.example.com'})
    assert urlparse(resp.headers['Location']).netloc in ('', 'localhost')
    assert location(resp) == '/'


def test_admin_login_goes_to_dashboard(client):
    store.create_user(config.ADMIN_EMAIL.lower(), 'Admin', generate_password_hash('secret'))
    resp = client.post('/login', data={'email': config.ADMIN_EMAIL.upper(), 'password': 'secret'})
    assert location(resp) == '/admin/dashboard'


def test_cart_survives_login(client, mug):
    store.create_user('asha@example.com', 'Asha', generate_password_hash('pw'))
    client.post(f"/cart/add/{mug['id']}", json={'quantity': 2})
    client.post('/login', data={'email': 'asha@example.com', 'password': 'pw'})
    assert client.get('/api/cart').get_json()['item_count'] == 2


def test_profile_lists_orders(client, customer):
    order_id = store.create_order({'user_email': customer, 'items': [], 'total_price': 100})
    resp = client.get('/profile')
    assert resp.status_code == 200
    assert order_id.encode() in resp.data


# ==================== ADMIN ====================


def test_admin_pages_require_admin(client):
    resp = client.get('/admin')
    assert location(resp) == '/admin/login'

    sign_in(client, 'buyer@example.com')
    resp = client.get('/admin/orders')
    assert location(resp) == '/admin/login'
    query = parse_qs(urlparse(resp.headers['Location']).query)
    assert query['error'] == ['Unauthorized: You are not an administrator.']


def test_admin_check_is_case_insensitive(client):
    sign_in(client, config.ADMIN_EMAIL.upper())
    assert client.get('/admin/dashboard').status_code == 200


def test_dashboard_stats(client, admin, mug):
    store.create_user('a@example.com', 'A', 'hash')
    store.create_order({'user_email': 'a@example.com', 'items': [], 'total_price': 250.5})

    resp = client.get('/admin')
    assert resp.status_code == 200
    assert b'<span id="stat-users">1</span>' in resp.data
    assert b'<span id="stat-orders">1</span>' in resp.data
    assert b'<span id="stat-products">1</span>' in resp.data


def test_admin_users_and_orders_pages(client, admin):
    store.create_user('a@example.com', 'Alice', 'hash')
    store.create_order({'user_email': 'a@example.com', 'customer_name': 'Alice',
                        'items': [], 'total_price': 100})

    assert b'Alice' in client.get('/admin/users').data
    assert b'Alice' in client.get('/admin/orders?status=pending').data
    assert b'Alice' not in client.get('/admin/orders?status=shipped').data


def test_admin_updates_order_status(client, admin):
    order_id = store.create_order({'user_email': 'a@example.com', 'items': [], 'total_price': 100})

    client.post(f'/admin/order/{order_id}/status', data={'status': 'shipped'})
    order = store.get_order(order_id)
    assert order['status'] == 'shipped'
    assert order['updated_at']

    client.post(f'/admin/order/{order_id}/status', data={'status': 'lost'})
    assert store.get_order(order_id)['status'] == 'shipped'

    resp = client.post('/admin/order/ORD-missing/status', data={'status': 'shipped'})
    assert location(resp) == '/admin/orders'


def test_admin_adds_product_with_image(client, admin, categories):
    client.post('/admin/products/add', data={
        'name': 'New Gift', 'price': '250', 'stock': '4', 'category': 'gift-items',
        'images': (io.BytesIO(b'fake image'), 'gift.png'),
    }, content_type='multipart/form-data')

    rows = store.list_product_rows()
    assert len(rows) == 1
    product = rows[0]
    assert product['slug'].startswith('new-gift-')
    assert product['is_featured'] is True
    assert product['images'][0].startswith(
        f"https://{config.IMAGES_BUCKET}.s3.{config.REGION}.amazonaws.com/")
    assert product['images'][0].endswith('.png')

    s3 = boto3.client('s3', region_name=config.REGION)
    keys = [o['Key'] for o in s3.list_objects_v2(Bucket=config.IMAGES_BUCKET)['Contents']]
    assert product['images'][0].rsplit('/', 1)[1] in keys


def test_admin_add_product_requires_category(client, admin, categories):
    client.post('/admin/products/add', data={'name': 'No Category', 'price': '10'})
    assert store.list_product_rows() == []


def test_admin_edit_archives_product(client, admin, mug):
    client.post(f"/admin/products/{mug['id']}/edit", data={
        'name': 'Photo Mug', 'price': '450', 'stock': '10', 'category': 'sublimation-mugs',
        'keep_images': mug['images'], 'is_archived': '1'})

    row = store.get_product_row(mug['id'])
    assert row['is_archived'] is True
    assert row['is_featured'] is False
    assert row['price'] == 450
    assert row['images'] == mug['images']
    assert client.get('/products/photo-mug').status_code == 404


def test_admin_edit_clears_sale_price_and_delivery_charge(client, admin, frame):
    client.post(f"/admin/products/{frame['id']}/edit", data={
        'name': 'Wooden Frame', 'price': '700', 'stock': '2', 'category': 'frames',
        'sale_price': '', 'delivery_charge': '', 'is_featured': '1'})

    row = store.get_product_row(frame['id'])
    assert 'sale_price' not in row
    assert 'delivery_charge' not in row
    product = store.get_product(frame['id'])
    assert product['price'] == 700.0
    assert product['original_price'] is None
    assert product['delivery_charge'] == config.DEFAULT_DELIVERY_CHARGE


def test_admin_product_form_rejects_bad_numbers(client, admin, categories):
    base = {'name': 'Bad', 'stock': '1', 'category': 'gift-items'}
    for price in ('nan', 'inf', '-50', '0'):
        resp = client.post('/admin/products/add', data=dict(base, price=price))
        assert location(resp) == '/admin/products/add'
    resp = client.post('/admin/products/add', data=dict(base, price='10', stock='-1'))
    assert location(resp) == '/admin/products/add'
    assert store.list_product_rows() == []


def test_admin_edit_rejects_non_finite_price(client, admin, mug):
    resp = client.post(f"/admin/products/{mug['id']}/edit", data={
        'name': 'Photo Mug', 'price': 'inf', 'stock': '10', 'category': 'sublimation-mugs'})
    assert location(resp) == f"/admin/products/{mug['id']}/edit"
    assert store.get_product_row(mug['id'])['price'] == 400


def test_admin_delete_product_returns_to_next(client, admin, mug):
    resp = client.post(f"/admin/products/{mug['id']}/delete", data={'next': '/admin/products/global'})
    assert location(resp) == '/admin/products/global'
    assert store.get_product_row(mug['id']) is None


def test_seed_categories(client, admin):
    resp = client.get('/admin/products/add')
    assert b'Seed default categories' in resp.data

    client.post('/admin/categories/seed')
    assert [c['slug'] for c in store.list_categories()] == [
        'bottles', 'frames', 'gift-items', 'keychains', 'sublimation-mugs']


def test_admin_gift_tiers(client, admin, mug):
    client.post('/admin/gifts', data={'mode': 'custom', 'threshold': '1500', 'gift_name': 'Teddy'})
    client.post('/admin/gifts', data={'mode': 'product', 'threshold': '500', 'product_id': mug['id']})
    client.post('/admin/gifts', data={'mode': 'product', 'threshold': '900'})

    tiers = store.list_gift_tiers()
    assert [t['threshold_amount'] for t in tiers] == [500.0, 1500.0]
    assert tiers[0]['product']['name'] == 'Photo Mug'
    assert tiers[1]['gift_image_url'] == config.PLACEHOLDER_GIFT_IMAGE

    resp = client.get('/admin/gifts')
    assert b'value="2500"' in resp.data

    client.post(f"/admin/gifts/{tiers[0]['id']}/delete")
    assert [t['gift_name'] for t in store.list_gift_tiers()] == ['Teddy']


# ==================== VENDORS ====================

SHOP = {'shop_name': 'Mug House', 'owner_name': 'Ravi', 'phone_primary': '9000000002',
        'address': 'Market Road', 'pincode': '682002'}


def test_vendor_lifecycle(client, categories):
    seller = 'seller@example.com'
    sign_in(client, seller)
    client.post('/partner-registration', data=SHOP)
    vendor = store.vendor_for_user(seller)
    assert vendor['status'] == 'pending'
    assert vendor['product_limit'] == 0

    # second application is refused
    client.post('/partner-registration', data=SHOP)
    assert len(store.list_vendors()) == 1

    # not approved yet
    resp = client.get('/vendor/products')
    assert location(resp) == '/partner-registration'

    sign_in(client, config.ADMIN_EMAIL)
    assert b'Mug House' in client.get('/admin/vendors').data
    client.post(f"/admin/vendors/{vendor['id']}/approve", data={'product_limit': '1'})
    vendor = store.get_vendor(vendor['id'])
    assert (vendor['status'], vendor['product_limit']) == ('approved', 1)

    sign_in(client, seller)
    product = {'name': 'Shop Mug', 'price': '300', 'stock': '5', 'category': 'sublimation-mugs'}
    client.post('/vendor/products/add', data=product)
    client.post('/vendor/products/add', data=dict(product, name='Over Limit'))
    assert [p['name'] for p in store.vendor_products(vendor['id'])] == ['Shop Mug']
    assert b'Shop Mug' in client.get('/vendor/products').data

    sign_in(client, config.ADMIN_EMAIL)
    resp = client.get('/admin/products/global?search=mug%20house')
    assert b'Shop Mug' in resp.data

    client.post(f"/admin/vendors/{vendor['id']}/toggle-ban")
    assert store.get_vendor(vendor['id'])['status'] == 'suspended'
    assert b'Mug House' in client.get('/admin/vendors/active').data

    client.post(f"/admin/vendors/{vendor['id']}/toggle-ban")
    assert store.get_vendor(vendor['id'])['status'] == 'approved'

    client.post(f"/admin/vendors/{vendor['id']}/limit", data={'product_limit': '5'})
    assert store.get_vendor(vendor['id'])['product_limit'] == 5

    client.post(f"/admin/vendors/{vendor['id']}/limit", data={'product_limit': '-1'})
    assert store.get_vendor(vendor['id'])['product_limit'] == 5


def test_rejected_vendor_cannot_reapply(client):
    sign_in(client, 'seller@example.com')
    client.post('/partner-registration', data=SHOP)
    vendor = store.vendor_for_user('seller@example.com')

    sign_in(client, config.ADMIN_EMAIL)
    client.post(f"/admin/vendors/{vendor['id']}/reject")
    assert store.get_vendor(vendor['id'])['status'] == 'rejected'

    resp = client.post(f"/admin/vendors/{vendor['id']}/toggle-ban")
    assert location(resp) == '/admin/vendors/active'
    assert store.get_vendor(vendor['id'])['status'] == 'rejected'

    sign_in(client, 'seller@example.com')
    client.post('/partner-registration', data=dict(SHOP, shop_name='Second Try'))
    assert [v['shop_name'] for v in store.list_vendors()] == ['Mug House']


def test_vendor_cannot_delete_another_shops_product(client, mug):
    store.create_vendor('seller@example.com', **SHOP)
    vendor = store.vendor_for_user('seller@example.com')
    store.update_vendor(vendor['id'], status='approved', product_limit=3)

    sign_in(client, 'seller@example.com')
    client.post(f"/vendor/products/{mug['id']}/delete")
    assert store.get_product_row(mug['id']) is not None

import pytest
from moto import mock_aws

import config
import mock_server
import store

# Mock credentials (must be set before any boto3 client is created)
mock_server.fake_credentials()

from app import app as flask_app  # noqa: E402


@pytest.fixture
def aws():
    with mock_aws():
        mock_server.setup_infrastructure()
        yield
        store.reset_connections()
        config.SNS_TOPIC_ARN = ''


@pytest.fixture
def app(aws):
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in(client, email, name='Test User'):
    with client.session_transaction() as sess:
        sess['user'] = {'email': email, 'name': name}


@pytest.fixture
def customer(client):
    sign_in(client, 'buyer@example.com', 'Buyer')
    return 'buyer@example.com'


@pytest.fixture
def admin(client):
    sign_in(client, config.ADMIN_EMAIL, 'Administrator')
    return config.ADMIN_EMAIL


@pytest.fixture
def categories(aws):
    store.seed_categories()
    return store.categories_by_slug()


@pytest.fixture
def mug(categories):
    product_id = store.create_product({
        'name': 'Photo Mug',
        'slug': 'photo-mug',
        'description': 'A mug with your photo',
        'price': 400.0,
        'stock': 10,
        'category': 'sublimation-mugs',
        'images': ['https://example.com/mug.jpg'],
    })
    return store.get_product(product_id)


@pytest.fixture
def frame(categories):
    product_id = store.create_product({
        'name': 'Wooden Frame',
        'slug': 'wooden-frame',
        'description': 'Hand made frame',
        'price': 700.0,
        'sale_price': 600.0,
        'stock': 2,
        'category': 'frames',
        'delivery_charge': 50.0,
    })
    return store.get_product(product_id)

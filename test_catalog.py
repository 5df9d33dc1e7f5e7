import pytest

from catalog import (discount_percentage, filter_products, parse_product_form,
                     related_products, search_products, sort_products,
                     transform_product)


def row(**kwargs):
    base = {'id': 'p1', 'name': 'Mug', 'price': 500, 'stock': 3, 'category': 'sublimation-mugs'}
    base.update(kwargs)
    return base


def test_transform_product_applies_lower_sale_price():
    p = transform_product(row(sale_price=450))
    assert p['price'] == 450.0
    assert p['original_price'] == 500.0


def test_transform_product_ignores_higher_sale_price():
    p = transform_product(row(sale_price=600))
    assert p['price'] == 500.0
    assert p['original_price'] is None


def test_transform_product_defaults():
    p = transform_product({'id': 7, 'name': 'Thing'})
    assert p['id'] == '7'
    assert p['category'] == 'gift-items'
    assert p['delivery_charge'] == 40.0
    assert p['in_stock'] is False
    assert p['images'] == []
    assert p['is_archived'] is False


def test_transform_product_category_name():
    cats = {'sublimation-mugs': {'slug': 'sublimation-mugs', 'name': 'Sublimation Mugs'}}
    assert transform_product(row(), cats)['category_name'] == 'Sublimation Mugs'


def _products():
    return [
        transform_product(row(id='a', name='banana mug', price=300, stock=0, created_at='2026-01-01')),
        transform_product(row(id='b', name='Apple frame', price=900, category='frames',
                              description='oak wood', created_at='2026-03-01')),
        transform_product(row(id='c', name='Cherry mug', price=600, created_at='2026-02-01')),
    ]


def test_filter_products():
    products = _products()
    assert [p['id'] for p in filter_products(products, min_price=400)] == ['b', 'c']
    assert [p['id'] for p in filter_products(products, max_price=600)] == ['a', 'c']
    assert [p['id'] for p in filter_products(products, in_stock_only=True)] == ['b', 'c']


def test_sort_products():
    products = _products()
    assert [p['id'] for p in sort_products(products, 'price-asc')] == ['a', 'c', 'b']
    assert [p['id'] for p in sort_products(products, 'price-desc')] == ['b', 'c', 'a']
    assert [p['id'] for p in sort_products(products, 'name')] == ['b', 'a', 'c']
    assert [p['id'] for p in sort_products(products, 'newest')] == ['b', 'c', 'a']
    assert [p['id'] for p in sort_products(products, 'unknown')] == ['a', 'b', 'c']


def test_search_products_matches_name_description_category():
    products = _products()
    assert [p['id'] for p in search_products(products, 'MUG')] == ['a', 'c']
    assert [p['id'] for p in search_products(products, 'oak')] == ['b']
    assert [p['id'] for p in search_products(products, 'frames')] == ['b']


def test_related_products_excludes_self():
    products = _products()
    related = related_products(products[0], products)
    assert [p['id'] for p in related] == ['c']


def test_discount_percentage():
    assert discount_percentage(500, 400) == 20
    assert discount_percentage(None, 400) == 0
    assert discount_percentage(400, 400) == 0


def product_form(**kwargs):
    form = {'name': 'Mug', 'price': '250', 'stock': '3', 'category': 'sublimation-mugs'}
    form.update(kwargs)
    return form


def test_parse_product_form():
    fields = parse_product_form(product_form(sale_price='200', delivery_charge=''))
    assert fields['price'] == 250.0
    assert fields['sale_price'] == 200.0
    assert fields['stock'] == 3
    assert 'delivery_charge' not in fields


def test_parse_product_form_blank_optional_fields_clear_when_editing():
    fields = parse_product_form(product_form(sale_price='', delivery_charge=' '), editing=True)
    assert fields['sale_price'] is None
    assert fields['delivery_charge'] is None


@pytest.mark.parametrize('overrides, message', [
    ({'name': ''}, 'name is required'),
    ({'category': ''}, 'select a category'),
    ({'price': 'abc'}, 'Price must be a number'),
    ({'price': 'nan'}, 'finite'),
    ({'price': 'inf'}, 'finite'),
    ({'price': '0'}, 'greater than 0'),
    ({'price': '-50'}, 'greater than 0'),
    ({'sale_price': '-1'}, 'at least 0'),
    ({'delivery_charge': 'inf'}, 'finite'),
    ({'stock': '-2'}, 'cannot be negative'),
    ({'stock': '1.5'}, 'whole number'),
])
def test_parse_product_form_rejects_bad_values(overrides, message):
    with pytest.raises(ValueError, match=message):
        parse_product_form(product_form(**overrides))

class VendorError(ValueError):
    pass


def check_application(existing):
    if existing is None:
        return
    if existing.get('status') == 'rejected':
        raise VendorError('Your previous application was rejected. Please contact us.')
    raise VendorError('You have already registered a shop.')


def check_can_add_product(vendor, product_count):
    if vendor is None:
        raise VendorError('Register your shop first.')
    if vendor.get('status') != 'approved':
        raise VendorError('Your shop is not approved for selling.')
    limit = int(vendor.get('product_limit', 0) or 0)
    if product_count >= limit:
        raise VendorError(f"Product limit reached ({limit}).")


def toggled_status(status):
    """Ban an approved shop or reactivate a suspended one."""
    if status == 'approved':
        return 'suspended'
    if status == 'suspended':
        return 'approved'
    raise VendorError(f"Cannot toggle a shop in status '{status}'.")


def parse_limit(value):
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise VendorError('Product limit must be a whole number.')
    if limit < 0:
        raise VendorError('Product limit cannot be negative.')
    return limit

# products/permissions.py

from django.conf import settings

# Which mutating operations check that the caller owns the product.
# Dispatch has never checked ownership; this looks like an oversight but
# changing it needs a product decision, so it stays configurable.
DEFAULT_OPERATION_POLICIES = {
    'update': {'requires_ownership': True},
    'soft_delete': {'requires_ownership': True},
    'dispatch': {'requires_ownership': False},
}


def is_owner(acting_user_id, product):
    """True when the acting user id equals the product's owner id."""
    return acting_user_id is not None and acting_user_id == product.user_id


def requires_ownership(operation):
    policies = {
        **DEFAULT_OPERATION_POLICIES,
        **getattr(settings, 'PRODUCT_OPERATION_POLICIES', {}),
    }
    return bool(policies[operation]['requires_ownership'])

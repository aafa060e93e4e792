# products/services.py

import logging
import math
from dataclasses import dataclass
from typing import Any

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from .exceptions import NOT_OWNER, DuplicateReview, ProductNotFound, ProductWriteFailed
from .filters import ProductFilter
from .models import Product, Review
from .permissions import is_owner, requires_ownership

logger = logging.getLogger(__name__)

SAMPLE_NAME = 'Sample name'
SAMPLE_IMAGE = '/images/sample.jpg'


@dataclass(frozen=True)
class ProductUpdate:
    """
    The full set of vendor-editable fields.

    An update replaces all five fields; a key missing from the request
    payload becomes ``None`` rather than keeping the stored value.
    """
    name: Any
    price: Any
    image: Any
    bundle_quantity: Any
    remaining_quantity: Any

    @classmethod
    def from_payload(cls, data):
        return cls(
            name=data.get('name'),
            price=data.get('price'),
            image=data.get('image'),
            bundle_quantity=data.get('bundleQuantity'),
            remaining_quantity=data.get('remainingQuantity'),
        )


class ProductLifecycleService:
    """
    Catalog queries, vendor mutations and review aggregation for products.

    Every mutation is a plain load, change in memory, save. There is no
    version check, so two concurrent writers on one product resolve as
    last write wins.
    """

    # ------------------
    # CATALOG QUERIES
    # ------------------
    def list_available(self, keyword=None):
        queryset = Product.objects.filter(remaining_quantity__gt=0).prefetch_related('reviews')
        return ProductFilter({'keyword': keyword or ''}, queryset=queryset).qs

    def get_by_id(self, product_id):
        return self._load(
            product_id,
            Product.objects.select_related('user').prefetch_related('reviews'),
        )

    def list_own_waitlisted(self, user):
        return Product.objects.filter(
            user=user,
            remaining_quantity__gt=0,
        ).exclude(status=Product.CANCELLED).prefetch_related('reviews')

    def list_own_dispatch_ready(self, user):
        return Product.objects.filter(
            user=user,
            remaining_quantity=0,
            status=Product.PLACED,
        ).prefetch_related('reviews')

    def list_own_dispatched(self, user):
        return Product.objects.filter(
            user=user,
            status=Product.DISPATCHED,
        ).prefetch_related('reviews')

    # ------------------
    # LIFECYCLE TRANSITIONS
    # ------------------
    def create(self, owner):
        # Placeholder values; the vendor edits them straight after creating
        product = Product.objects.create(
            user=owner,
            name=SAMPLE_NAME,
            price=0,
            image=SAMPLE_IMAGE,
            bundle_quantity=0,
            num_reviews=0,
        )
        logger.info("Product %s created for user %s", product.pk, owner.pk)
        return product

    def update(self, product_id, acting_user, changes):
        product = self._load(product_id)
        self._check_owner('update', product, acting_user)

        product.name = changes.name
        product.price = changes.price
        product.image = changes.image
        product.bundle_quantity = self._whole_number('bundle_quantity', changes.bundle_quantity)
        product.remaining_quantity = self._whole_number('remaining_quantity', changes.remaining_quantity)

        self._save(product)
        logger.info("Product %s updated by user %s", product.pk, acting_user.pk)
        return product

    def soft_delete(self, product_id, acting_user):
        product = self._load(product_id)
        self._check_owner('soft_delete', product, acting_user)

        product.status = Product.CANCELLED
        product.remaining_quantity = 0
        self._save(product)
        logger.info("Product %s cancelled by user %s", product.pk, acting_user.pk)
        return 'Product removed'

    def dispatch(self, product_id, acting_user=None):
        product = self._load(product_id)
        self._check_owner('dispatch', product, acting_user)

        # No status guard: a cancelled product can still be dispatched
        product.status = Product.DISPATCHED
        self._save(product)
        logger.info(
            "Product %s dispatched by user %s",
            product.pk, getattr(acting_user, 'pk', None),
        )
        return product

    # ------------------
    # REVIEWS
    # ------------------
    def add_review(self, product_id, acting_user, rating, comment):
        product = self._load(product_id)

        reviews = list(product.reviews.all())
        if any(review.user_id == acting_user.pk for review in reviews):
            logger.info("User %s already reviewed product %s", acting_user.pk, product.pk)
            raise DuplicateReview()

        review = Review(
            product=product,
            user=acting_user,
            name=acting_user.name,
            rating=self._coerce_rating(rating),
            comment=comment,
        )
        reviews.append(review)

        product.num_reviews = len(reviews)
        product.rating = sum(r.rating for r in reviews) / len(reviews)

        with transaction.atomic():
            self._save(review)
            self._save(product)

        logger.info(
            "Review added to product %s by user %s (%s reviews, rating %.2f)",
            product.pk, acting_user.pk, product.num_reviews, product.rating,
        )
        return 'Review added'

    # ------------------
    # HELPERS
    # ------------------
    def _load(self, product_id, queryset=None):
        queryset = Product.objects.all() if queryset is None else queryset
        try:
            return queryset.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, ValidationError):
            # Malformed ids are reported exactly like unknown ones
            logger.info("Product %s not found", product_id)
            raise ProductNotFound(product_id)

    def _check_owner(self, operation, product, acting_user):
        if not requires_ownership(operation):
            return
        if not is_owner(getattr(acting_user, 'pk', None), product):
            logger.warning(
                "User %s refused %s on product %s (reason=%s)",
                getattr(acting_user, 'pk', None), operation, product.pk, NOT_OWNER,
            )
            raise ProductNotFound(product.pk, reason=NOT_OWNER)

    def _save(self, instance):
        try:
            instance.full_clean()
            with transaction.atomic():
                instance.save()
        except ValidationError as e:
            raise ProductWriteFailed(self._describe(instance, e))
        except DatabaseError as e:
            logger.error("Saving %s %s failed: %s", type(instance).__name__, instance.pk, e, exc_info=True)
            raise ProductWriteFailed()

    @staticmethod
    def _coerce_rating(value):
        try:
            rating = float(value)
        except (TypeError, ValueError):
            rating = math.nan
        # inf and nan cannot be rendered as JSON
        if not math.isfinite(rating):
            raise ProductWriteFailed('Review validation failed: rating must be a number')
        return rating

    @staticmethod
    def _whole_number(field, value):
        # int() would silently truncate 2.5 to 2
        if isinstance(value, float) and not value.is_integer():
            raise ProductWriteFailed(f"Product validation failed: {field}: must be a whole number")
        return value

    @staticmethod
    def _describe(instance, error):
        if hasattr(error, 'message_dict'):
            details = '; '.join(
                f"{field}: {' '.join(messages)}" for field, messages in error.message_dict.items()
            )
        else:
            details = ' '.join(error.messages)
        return f"{type(instance).__name__} validation failed: {details}"

from django.db import models
from django.conf import settings


# -----------------------------
# Product Model
# -----------------------------
class Product(models.Model):
    PLACED = 'Placed'
    DISPATCHED = 'Dispatched'
    CANCELLED = 'Cancelled'
    STATUS_CHOICES = (
        (PLACED, 'Placed'),
        (DISPATCHED, 'Dispatched'),
        (CANCELLED, 'Cancelled'),
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=255)
    image = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Units per lot, captured when the vendor lists the product
    bundle_quantity = models.PositiveIntegerField(default=0)
    remaining_quantity = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PLACED)

    # Denormalised from reviews, rewritten on every review
    num_reviews = models.PositiveIntegerField(default=0)
    rating = models.FloatField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.status})"


# -----------------------------
# Review Model
# -----------------------------
class Review(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')

    # Reviewer name as it was when the review was written
    name = models.CharField(max_length=150, blank=True)
    rating = models.FloatField()
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.name} - {self.product.name} ({self.rating})"

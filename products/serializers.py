from rest_framework import serializers

from .models import Product, Review
from users.models import CustomUser


# ----------------------------------------------------
# 1. REVIEW SERIALIZER
# ----------------------------------------------------
class ReviewSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'name', 'rating', 'comment', 'user', 'createdAt']
        read_only_fields = ['id', 'name', 'rating', 'comment', 'user']


# ----------------------------------------------------
# 2. PRODUCT SERIALIZERS
# ----------------------------------------------------
class ProductOwnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email']


class ProductSerializer(serializers.ModelSerializer):
    bundleQuantity = serializers.IntegerField(source='bundle_quantity', read_only=True)
    remainingQuantity = serializers.IntegerField(source='remaining_quantity', read_only=True)
    numReviews = serializers.IntegerField(source='num_reviews', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    reviews = ReviewSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'user', 'name', 'image', 'price',
            'bundleQuantity', 'remainingQuantity', 'status',
            'reviews', 'numReviews', 'rating',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = ['id', 'user', 'name', 'image', 'price', 'status', 'rating']


class ProductDetailSerializer(ProductSerializer):
    """Single product view, with the owner's name and email joined in."""
    user = ProductOwnerSerializer(read_only=True)

from djoser.serializers import UserCreatePasswordRetypeSerializer
from rest_framework import serializers

from .models import CustomUser


class CustomUserCreateSerializer(UserCreatePasswordRetypeSerializer):
    class Meta(UserCreatePasswordRetypeSerializer.Meta):
        model = CustomUser
        fields = ('id', 'email', 'username', 'name', 'password')


class CustomUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ('id', 'username', 'email', 'name', 'is_active', 'is_staff')
        read_only_fields = ('id', 'email', 'is_active', 'is_staff')

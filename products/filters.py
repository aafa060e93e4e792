import django_filters

from .models import Product


class ProductFilter(django_filters.FilterSet):
    # Case-insensitive substring match on the product name
    keyword = django_filters.CharFilter(field_name='name', lookup_expr='icontains')

    class Meta:
        model = Product
        fields = []

from django.contrib import admin
from django.utils.html import format_html
from .models import Product, Review


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ('name', 'user', 'rating', 'comment', 'created_at')
    readonly_fields = ('name', 'user', 'rating', 'comment', 'created_at')
    can_delete = False

    def has_add_permission(self, request, obj=None):
        # Reviews only come in through the API so the cached rating stays in step
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        'name',
        'owner_name',
        'price',
        'status',
        'bundle_quantity',
        'remaining_quantity',
        'num_reviews',
        'rating',
        'image_preview',
    )
    list_filter = ('status',)
    search_fields = ('name', 'user__name', 'user__email')

    fieldsets = (
        (None, {'fields': ('name', 'user')}),
        ('Pricing and Inventory', {'fields': ('price', 'bundle_quantity', 'remaining_quantity', 'status')}),
        ('Reviews', {'fields': ('num_reviews', 'rating')}),
        ('Media', {'fields': ('image', 'image_preview')}),
    )
    readonly_fields = ('num_reviews', 'rating', 'image_preview')
    inlines = [ReviewInline]

    actions = ['mark_dispatched', 'mark_cancelled']

    @admin.action(description="Mark selected products as Dispatched")
    def mark_dispatched(self, request, queryset):
        updated = queryset.update(status=Product.DISPATCHED)
        self.message_user(request, f"{updated} products marked as Dispatched.")

    @admin.action(description="Cancel selected products")
    def mark_cancelled(self, request, queryset):
        updated = queryset.update(status=Product.CANCELLED, remaining_quantity=0)
        self.message_user(request, f"{updated} products cancelled.")

    def image_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" width="50" height="50" style="object-fit:cover; border-radius: 4px;" />',
                obj.image
            )
        return "-"
    image_preview.short_description = 'Preview'

    def owner_name(self, obj):
        return obj.user.name if obj.user else '-'
    owner_name.short_description = 'Vendor'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')

    def has_delete_permission(self, request, obj=None):
        # Products are cancelled, never removed
        return False

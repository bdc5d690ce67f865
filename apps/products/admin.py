from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """
    Admin interface for products.

    Stock and status are read-only here: stock moves only through the
    ledger endpoints so every change is audited.
    """

    list_display = ['name', 'barcode', 'category', 'price', 'cost_price', 'profit_margin', 'stock', 'status']
    list_filter = ['category', 'status', 'unit_of_measure']
    search_fields = ['name', 'barcode', 'description']
    ordering = ['-created_at']
    readonly_fields = ['stock', 'status', 'profit_margin', 'created_at', 'updated_at', 'deleted_at']

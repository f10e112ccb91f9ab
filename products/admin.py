from django.contrib import admin
from .models import Category, Product, Package, PackageItem


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'stock', 'min_stock', 'is_bestseller', 'is_active']
    list_filter = ['is_active', 'is_bestseller', 'category']
    search_fields = ['name', 'description']
    list_editable = ['price', 'stock', 'is_active']
    prepopulated_fields = {'slug': ('name',)}


class PackageItemInline(admin.TabularInline):
    model = PackageItem
    raw_id_fields = ['product']
    extra = 1


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    inlines = [PackageItemInline]
    list_display = ['name', 'price', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']

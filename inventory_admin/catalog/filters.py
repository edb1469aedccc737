import django_filters
from django.db.models import Q
from .models import Item, OnlineProduct


class ItemFilter(django_filters.FilterSet):
    """Filters for the item list"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    warehouse = django_filters.NumberFilter(field_name='warehouse_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=Item.STATUS_CHOICES)
    item_type = django_filters.ChoiceFilter(choices=Item.ITEM_TYPE_CHOICES)
    requires_processing = django_filters.BooleanFilter()

    class Meta:
        model = Item
        fields = ['search', 'category', 'warehouse', 'status', 'item_type', 'requires_processing']

    def filter_search(self, queryset, name, value):
        """Every word must appear in the name, SKU or HSN code"""
        if not value:
            return queryset
        for word in value.split():
            queryset = queryset.filter(
                Q(item_name__icontains=word) |
                Q(item_code__icontains=word) |
                Q(hsn_code__icontains=word)
            )
        return queryset


class OnlineProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    item = django_filters.NumberFilter(field_name='item_id')
    category = django_filters.NumberFilter(field_name='item__category_id')
    is_published = django_filters.BooleanFilter()
    is_featured = django_filters.BooleanFilter()

    class Meta:
        model = OnlineProduct
        fields = ['search', 'item', 'category', 'is_published', 'is_featured']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(slug__icontains=value) | Q(item__item_code__icontains=value))

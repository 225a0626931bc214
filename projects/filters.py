"""django-filter FilterSets for project listings."""

from django.utils import timezone
from django_filters import rest_framework as filters

from .models import Project


class ProjectFilter(filters.FilterSet):
    """
    Query params:
        due_before / due_after  inclusive bounds on `due_on` (YYYY-MM-DD)
        late                    true: past due; false: due today, later, or undated
    """
    due_before = filters.DateFilter(field_name="due_on", lookup_expr="lte")
    due_after = filters.DateFilter(field_name="due_on", lookup_expr="gte")
    late = filters.BooleanFilter(method="filter_late")

    class Meta:
        model = Project
        fields = ["due_before", "due_after", "late"]

    def filter_late(self, queryset, name, value):
        if value:
            return queryset.late()
        return queryset.exclude(due_on__lt=timezone.localdate())

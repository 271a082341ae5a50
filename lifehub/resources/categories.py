"""Category service."""

from lifehub.models.category import Category
from lifehub.resources.base import ScopedResourceService


class CategoryService(ScopedResourceService):
    kind = 'categories'
    label = 'Category'
    model = Category
    writable_fields = ('name', 'color')
    required_fields = ('name',)

    def ordering(self):
        return (Category.name.asc(),)

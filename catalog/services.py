import logging
from decimal import Decimal, InvalidOperation

from django.db.models import ProtectedError

from backoffice.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.http import as_number
from .colors import dump_colors, normalize_colors
from .models import Category, Product

logger = logging.getLogger(__name__)

PRODUCT_STATUSES = {choice for choice, _ in Product.STATUS_CHOICES}


def serialize_category(category):
    return {
        'id': category.pk,
        'name': category.name,
        'description': category.description,
        'createdAt': category.created_at.isoformat() if category.created_at else None,
        'updatedAt': category.updated_at.isoformat() if category.updated_at else None,
    }


def serialize_product(product):
    category = product.category
    return {
        'id': product.pk,
        'name': product.name,
        'description': product.description,
        'price': as_number(product.price),
        'originalPrice': as_number(product.original_price),
        'images': product.images or [],
        'categoryId': product.category_id,
        'status': product.status,
        'colors': product.color_list or None,
        'isShowcase': product.is_showcase,
        'showcaseImage': product.showcase_image,
        'createdAt': product.created_at.isoformat() if product.created_at else None,
        'updatedAt': product.updated_at.isoformat() if product.updated_at else None,
        'category': {
            'id': category.pk,
            'name': category.name,
            'description': category.description,
        } if category else None,
    }


def _to_id(value, label):
    if value in (None, ''):
        raise ValidationError(f'{label} is required')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{label} must be a valid number')


def _colors_field(colors):
    if not colors:
        return None
    if isinstance(colors, str):
        colors = [colors]
    if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
        raise ValidationError('Colors must be a list of strings')
    return dump_colors(normalize_colors(colors))


def _to_decimal(value, label):
    if isinstance(value, bool):
        raise ValidationError(f'{label} must be a number')
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f'{label} must be a number')


class CategoryService:
    def get_all_categories(self, query=None):
        query = query or {}
        categories = Category.objects.all()
        if query.get('name'):
            categories = categories.filter(name__icontains=query['name'])
        if query.get('description'):
            categories = categories.filter(description__icontains=query['description'])
        categories = list(categories)
        logger.info('Retrieved %s categories', len(categories))
        return categories

    def get_category_by_id(self, category_id):
        pk = _to_id(category_id, 'Category ID')
        category = Category.objects.filter(pk=pk).first()
        if category is None:
            logger.warning('Category not found with id: %s', category_id)
            raise NotFoundError('Category not found')
        return category

    def create_category(self, data):
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError('Name is required')
        if Category.objects.filter(name__iexact=name).exists():
            raise ConflictError(f'Category {name} already exists')

        category = Category.objects.create(name=name, description=data.get('description'))
        logger.info('Category created successfully: %s (ID: %s)', category.name, category.pk)
        return category

    def update_category(self, category_id, data):
        category = self.get_category_by_id(category_id)
        if not data:
            raise ValidationError('At least one field must be provided for update')

        if 'name' in data:
            name = (data.get('name') or '').strip()
            if not name:
                raise ValidationError('Name cannot be empty')
            clash = Category.objects.filter(name__iexact=name).exclude(pk=category.pk)
            if clash.exists():
                raise ConflictError(f'Category {name} already exists')
            category.name = name
        if 'description' in data:
            category.description = data.get('description')

        category.save()
        logger.info('Category updated successfully: %s (ID: %s)', category.name, category.pk)
        return category

    def delete_category(self, category_id):
        category = self.get_category_by_id(category_id)
        try:
            category.delete()
        except ProtectedError:
            raise ConflictError('Category has products and cannot be deleted')
        logger.info('Category deleted successfully with id: %s', category_id)


class ProductService:
    def get_all_products(self, query=None):
        query = query or {}
        products = Product.objects.select_related('category')
        if query.get('name'):
            products = products.filter(name__icontains=query['name'])
        if query.get('description'):
            products = products.filter(description__icontains=query['description'])
        if query.get('categoryId'):
            products = products.filter(category_id=_to_id(query['categoryId'], 'Category ID'))
        if query.get('status'):
            products = products.filter(status=query['status'])
        if query.get('isShowcase'):
            products = products.filter(is_showcase=query['isShowcase'] == 'true')
        if query.get('minPrice'):
            products = products.filter(price__gte=_to_decimal(query['minPrice'], 'minPrice'))
        if query.get('maxPrice'):
            products = products.filter(price__lte=_to_decimal(query['maxPrice'], 'maxPrice'))

        products = list(products)
        logger.info('Retrieved %s products', len(products))
        return products

    def get_product_by_id(self, product_id):
        pk = _to_id(product_id, 'Product ID')
        product = Product.objects.select_related('category').filter(pk=pk).first()
        if product is None:
            logger.warning('Product not found with id: %s', product_id)
            raise NotFoundError('Product not found')
        return product

    def get_products_by_category(self, category_id):
        category = CategoryService().get_category_by_id(category_id)
        products = list(category.products.select_related('category'))
        logger.info('Retrieved %s products for category: %s', len(products), category.name)
        return products

    def get_showcase_products(self):
        products = list(Product.objects.select_related('category').filter(is_showcase=True))
        logger.info('Retrieved %s showcase products', len(products))
        return products

    def create_product(self, data):
        logger.info('Creating product: %s', data.get('name'))

        if not all(data.get(k) for k in ('name', 'description', 'price', 'categoryId')):
            raise ValidationError('Name, description, price, and categoryId are required')
        images = data.get('images')
        if not isinstance(images, list) or not images:
            raise ValidationError('At least one image is required')

        price = _to_decimal(data['price'], 'Price')
        if price <= 0:
            raise ValidationError('Price must be greater than 0')
        original_price = None
        if data.get('originalPrice') is not None:
            original_price = _to_decimal(data['originalPrice'], 'Original price')
            if original_price <= 0:
                raise ValidationError('Original price must be greater than 0')

        status = data.get('status') or Product.STATUS_AVAILABLE
        if status not in PRODUCT_STATUSES:
            raise ValidationError(f'Status must be one of: {", ".join(sorted(PRODUCT_STATUSES))}')

        category = Category.objects.filter(pk=_to_id(data['categoryId'], 'Category ID')).first()
        if category is None:
            logger.warning('Product creation failed: category not found with id %s', data['categoryId'])
            raise ValidationError('Category not found')

        colors = _colors_field(data.get('colors'))
        product = Product.objects.create(
            name=data['name'],
            description=data['description'],
            price=price,
            original_price=original_price,
            images=images,
            category=category,
            status=status,
            colors=colors,
            is_showcase=bool(data.get('isShowcase', False)),
            showcase_image=data.get('showcaseImage'),
        )
        logger.info('Product created successfully: %s (ID: %s)', product.name, product.pk)
        return product

    def update_product(self, product_id, data):
        logger.info('Updating product with id: %s', product_id)
        pk = _to_id(product_id, 'Product ID')
        if not data:
            raise ValidationError('At least one field must be provided for update')

        if 'price' in data and _to_decimal(data['price'], 'Price') <= 0:
            raise ValidationError('Price must be greater than 0')
        if data.get('originalPrice') is not None and _to_decimal(data['originalPrice'], 'Original price') <= 0:
            raise ValidationError('Original price must be greater than 0')
        if 'images' in data and not data['images']:
            raise ValidationError('At least one image is required')
        if data.get('status') and data['status'] not in PRODUCT_STATUSES:
            raise ValidationError(f'Status must be one of: {", ".join(sorted(PRODUCT_STATUSES))}')

        product = Product.objects.select_related('category').filter(pk=pk).first()
        if product is None:
            logger.warning('Product update failed: product not found with id %s', product_id)
            raise NotFoundError('Product not found')

        if data.get('categoryId'):
            category = Category.objects.filter(pk=_to_id(data['categoryId'], 'Category ID')).first()
            if category is None:
                logger.warning('Product update failed: category not found with id %s', data['categoryId'])
                raise ValidationError('Category not found')
            product.category = category

        if data.get('name'):
            product.name = data['name']
        if data.get('description'):
            product.description = data['description']
        if 'price' in data:
            product.price = _to_decimal(data['price'], 'Price')
        if 'originalPrice' in data:
            product.original_price = (
                None if data['originalPrice'] is None
                else _to_decimal(data['originalPrice'], 'Original price')
            )
        if data.get('images'):
            product.images = data['images']
        if data.get('status'):
            product.status = data['status']
        if 'colors' in data:
            product.colors = _colors_field(data['colors'])
        if 'isShowcase' in data:
            product.is_showcase = bool(data['isShowcase'])
        if 'showcaseImage' in data:
            product.showcase_image = data['showcaseImage']

        product.save()
        logger.info('Product updated successfully: %s (ID: %s)', product.name, product.pk)
        return product

    def delete_product(self, product_id):
        pk = _to_id(product_id, 'Product ID')
        deleted, _ = Product.objects.filter(pk=pk).delete()
        if not deleted:
            logger.warning('Product deletion failed: product not found with id %s', product_id)
            raise NotFoundError('Product not found')
        logger.info('Product deleted successfully with id: %s', product_id)

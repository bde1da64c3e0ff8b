import logging

from backoffice.auth import get_token_user
from backoffice.exceptions import ValidationError
from backoffice.http import api_view, method_not_allowed, parse_json_body, success_response
from .services import CategoryService, ProductService, serialize_category, serialize_product

logger = logging.getLogger(__name__)


@api_view
def product_collection(request):
    service = ProductService()

    if request.method == 'GET':
        logger.info('Processing GET request for products (public)')
        query = request.GET.dict()
        if query.get('showcase') == 'true':
            products = service.get_showcase_products()
            message = 'Showcase products retrieved successfully'
        elif query.get('categoryId'):
            products = service.get_products_by_category(query['categoryId'])
            message = 'Products by category retrieved successfully'
        else:
            products = service.get_all_products(query)
            message = 'Products retrieved successfully'
        return success_response(
            {'count': len(products), 'products': [serialize_product(p) for p in products]},
            message,
        )

    if request.method == 'POST':
        user = get_token_user(request)
        logger.info('Processing POST request for products (authenticated) by %s', user.get_username())
        payload = parse_json_body(request)
        if payload.get('id'):
            raise ValidationError('ID should not be provided when creating a product')
        product = service.create_product(payload)
        return success_response(serialize_product(product), 'Product created successfully', status=201)

    return method_not_allowed(request)


@api_view
def product_detail(request, product_id):
    service = ProductService()

    if request.method == 'GET':
        product = service.get_product_by_id(product_id)
        return success_response(serialize_product(product), 'Product retrieved successfully')

    if request.method not in ('PUT', 'DELETE'):
        return method_not_allowed(request)

    user = get_token_user(request)
    logger.info('Processing %s request for product %s by %s', request.method, product_id,
                user.get_username())

    if request.method == 'PUT':
        product = service.update_product(product_id, parse_json_body(request))
        return success_response(serialize_product(product), 'Product updated successfully')

    service.delete_product(product_id)
    return success_response(None, 'Product deleted successfully')


@api_view
def category_collection(request):
    service = CategoryService()

    if request.method == 'GET':
        categories = service.get_all_categories(request.GET.dict())
        return success_response(
            {'count': len(categories), 'categories': [serialize_category(c) for c in categories]},
            'Categories retrieved successfully',
        )

    if request.method == 'POST':
        get_token_user(request)
        payload = parse_json_body(request)
        if payload.get('id'):
            raise ValidationError('ID should not be provided when creating a category')
        category = service.create_category(payload)
        return success_response(serialize_category(category), 'Category created successfully', status=201)

    return method_not_allowed(request)


@api_view
def category_detail(request, category_id):
    service = CategoryService()

    if request.method == 'GET':
        category = service.get_category_by_id(category_id)
        return success_response(serialize_category(category), 'Category retrieved successfully')

    if request.method not in ('PUT', 'DELETE'):
        return method_not_allowed(request)

    get_token_user(request)

    if request.method == 'PUT':
        category = service.update_category(category_id, parse_json_body(request))
        return success_response(serialize_category(category), 'Category updated successfully')

    service.delete_category(category_id)
    return success_response(None, 'Category deleted successfully')

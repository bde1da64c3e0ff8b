import logging

from backoffice.auth import token_required
from backoffice.http import (
    api_view, method_not_allowed, parse_int, parse_json_body, success_response,
)
from .services import ClientService, QuoteService, serialize_client, serialize_quote

logger = logging.getLogger(__name__)


def _page_args(request):
    page = parse_int(request.GET.get('page'), 'page', default=1)
    limit = parse_int(request.GET.get('limit'), 'limit', default=10)
    return page, limit


@api_view
@token_required
def client_collection(request):
    service = ClientService()

    if request.method == 'GET':
        page, limit = _page_args(request)
        search = request.GET.get('search', '').strip()
        if search:
            clients, pagination = service.search_clients(search, page, limit)
        else:
            clients, pagination = service.get_all_clients(page, limit)
        return success_response(
            {'clients': [serialize_client(c) for c in clients], 'pagination': pagination},
            'Clients retrieved successfully',
        )

    if request.method == 'POST':
        client = service.create_client(parse_json_body(request))
        return success_response(serialize_client(client), 'Client created successfully', status=201)

    return method_not_allowed(request)


@api_view
@token_required
def client_detail(request, client_id):
    service = ClientService()

    if request.method == 'GET':
        client = service.get_client_by_id(client_id)
        return success_response(serialize_client(client), 'Client retrieved successfully')

    if request.method in ('PATCH', 'PUT'):
        client = service.update_client(client_id, parse_json_body(request))
        return success_response(serialize_client(client), 'Client updated successfully')

    if request.method == 'DELETE':
        service.delete_client(client_id)
        return success_response(None, 'Client deleted successfully')

    return method_not_allowed(request)


@api_view
@token_required
def quote_collection(request):
    service = QuoteService()

    if request.method == 'GET':
        page, limit = _page_args(request)
        search = request.GET.get('search', '').strip()
        client_id = request.GET.get('clientId')
        if client_id:
            quotes, pagination = service.get_quotes_by_client_id(
                parse_int(client_id, 'clientId'), page, limit)
        elif search:
            quotes, pagination = service.search_quotes(search, page, limit)
        else:
            quotes, pagination = service.get_all_quotes(page, limit)
        return success_response(
            {'quotes': [serialize_quote(q) for q in quotes], 'pagination': pagination},
            'Quotes retrieved successfully',
        )

    if request.method == 'POST':
        payload = parse_json_body(request)
        client_id = parse_int(payload.get('clientId'), 'clientId')
        quote = service.create_quote(client_id, payload.get('services'))
        logger.info('Quote %s created for client %s by %s', quote.pk, client_id,
                    request.token_user.get_username())
        return success_response(serialize_quote(quote), 'Quote created successfully', status=201)

    return method_not_allowed(request)


@api_view
@token_required
def quote_detail(request, quote_id):
    service = QuoteService()

    if request.method == 'GET':
        quote = service.get_quote_by_id(quote_id)
        return success_response(serialize_quote(quote), 'Quote retrieved successfully')

    if request.method in ('PATCH', 'PUT'):
        payload = parse_json_body(request)
        quote = service.update_quote(quote_id, payload.get('services'))
        return success_response(serialize_quote(quote), 'Quote updated successfully')

    if request.method == 'DELETE':
        service.delete_quote(quote_id)
        return success_response(None, 'Quote deleted successfully')

    return method_not_allowed(request)

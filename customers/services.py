import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db.models import Q

from backoffice.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.http import as_number, paginate
from .models import Client, Quote

logger = logging.getLogger(__name__)

CLIENT_FIELDS = {
    'name': 'name',
    'email': 'email',
    'phone': 'phone',
    'country': 'country',
    'companyName': 'company_name',
    'notes': 'notes',
    'monthlyAmount': 'monthly_amount',
    'paymentDayMonth': 'payment_day_month',
}
STRING_FIELDS = {'name', 'email', 'phone', 'country', 'company_name', 'notes'}


def serialize_client(client):
    return {
        'id': client.pk,
        'name': client.name,
        'email': client.email,
        'phone': client.phone,
        'country': client.country,
        'companyName': client.company_name,
        'notes': client.notes,
        'monthlyAmount': as_number(client.monthly_amount),
        'paymentDayMonth': client.payment_day_month,
        'createdAt': client.created_at.isoformat(),
        'updatedAt': client.updated_at.isoformat(),
    }


def serialize_quote(quote):
    client = quote.client
    return {
        'id': quote.pk,
        'clientId': quote.client_id,
        'client': {
            'id': client.pk,
            'name': client.name,
            'email': client.email,
            'phone': client.phone,
            'country': client.country,
            'companyName': client.company_name,
            'notes': client.notes,
        },
        'services': quote.services,
        'totalAmount': as_number(quote.total_amount),
        'createdAt': quote.created_at.isoformat(),
        'updatedAt': quote.updated_at.isoformat(),
    }


def validate_services(services):
    """Collect every problem with a quote's services list instead of stopping at the first."""
    if not isinstance(services, list) or not services:
        return ['services array is required and must contain at least one service']

    errors = []
    for index, service in enumerate(services):
        if not isinstance(service, dict):
            errors.append(f'services[{index}] must be an object')
            continue
        if not service.get('name'):
            errors.append(f'services[{index}].name is required')
        quantity = service.get('quantity')
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            errors.append(f'services[{index}].quantity must be greater than 0')
        if service.get('billingType') not in Quote.BILLING_TYPES:
            errors.append(f'services[{index}].billingType must be one of: {", ".join(Quote.BILLING_TYPES)}')
        value = service.get('value')
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            errors.append(f'services[{index}].value must be greater than 0')
    return errors


class ClientService:
    def _clean(self, data, partial=False):
        fields = {}
        for key, attr in CLIENT_FIELDS.items():
            if key in data:
                fields[attr] = data[key]

        errors = []
        if not partial:
            for key in ('name', 'email', 'phone', 'country'):
                if not data.get(key):
                    errors.append(f'{key} is required')
        for key, attr in CLIENT_FIELDS.items():
            if attr in STRING_FIELDS and fields.get(attr) is not None and not isinstance(fields[attr], str):
                errors.append(f'{key} must be a string')
        if isinstance(fields.get('email'), str) and fields['email']:
            try:
                validate_email(fields['email'])
            except DjangoValidationError:
                errors.append('email must be a valid email address')
        if fields.get('monthly_amount') is not None:
            try:
                fields['monthly_amount'] = Decimal(str(fields['monthly_amount']))
            except (InvalidOperation, ValueError):
                errors.append('monthlyAmount must be a number')
        day = fields.get('payment_day_month')
        if day is not None and (not isinstance(day, int) or not 1 <= day <= 31):
            errors.append('paymentDayMonth must be between 1 and 31')
        if errors:
            raise ValidationError(errors[0], errors)
        return fields

    def create_client(self, data):
        fields = self._clean(data)
        logger.info('Creating new client with email: %s', fields['email'])

        if Client.objects.filter(email__iexact=fields['email']).exists():
            raise ConflictError(f"Client with email {fields['email']} already exists")

        client = Client.objects.create(**fields)
        logger.info('Client created with ID: %s', client.pk)
        return client

    def get_all_clients(self, page=1, limit=10):
        logger.info('Fetching all clients - Page: %s, Limit: %s', page, limit)
        return paginate(Client.objects.all(), page, limit)

    def search_clients(self, query, page=1, limit=10):
        logger.info('Searching clients with query: %s', query)
        clients = Client.objects.filter(Q(name__icontains=query) | Q(email__icontains=query))
        return paginate(clients, page, limit)

    def get_client_by_id(self, client_id):
        logger.info('Fetching client by ID: %s', client_id)
        client = Client.objects.filter(pk=client_id).first()
        if client is None:
            raise NotFoundError(f'Client with ID {client_id} not found')
        return client

    def update_client(self, client_id, data):
        logger.info('Updating client with ID: %s', client_id)
        client = self.get_client_by_id(client_id)
        fields = self._clean(data, partial=True)
        if not fields:
            raise ValidationError('At least one field must be provided for update')

        new_email = fields.get('email')
        if new_email and new_email.lower() != client.email.lower():
            if Client.objects.filter(email__iexact=new_email).exclude(pk=client.pk).exists():
                raise ConflictError(f'Email {new_email} is already in use')

        for attr, value in fields.items():
            setattr(client, attr, value)
        client.save()
        logger.info('Client %s updated successfully', client_id)
        return client

    def delete_client(self, client_id):
        logger.info('Deleting client with ID: %s', client_id)
        client = self.get_client_by_id(client_id)
        client.delete()
        logger.info('Client %s deleted successfully', client_id)


class QuoteService:
    def __init__(self, client_service=None):
        self.client_service = client_service or ClientService()

    def _quotes(self):
        return Quote.objects.select_related('client')

    def get_all_quotes(self, page=1, limit=10):
        logger.info('Fetching all quotes - Page: %s, Limit: %s', page, limit)
        return paginate(self._quotes(), page, limit)

    def get_quotes_by_client_id(self, client_id, page=1, limit=10):
        logger.info('Fetching quotes for client %s - Page: %s, Limit: %s', client_id, page, limit)
        return paginate(self._quotes().filter(client_id=client_id), page, limit)

    def search_quotes(self, query, page=1, limit=10):
        logger.info('Searching quotes with query: %s - Page: %s, Limit: %s', query, page, limit)
        quotes = self._quotes().filter(
            Q(client__name__icontains=query)
            | Q(client__email__icontains=query)
            | Q(client__company_name__icontains=query)
        )
        return paginate(quotes, page, limit)

    def get_quote_by_id(self, quote_id):
        logger.info('Fetching quote %s', quote_id)
        quote = self._quotes().filter(pk=quote_id).first()
        if quote is None:
            raise NotFoundError(f'Quote with ID {quote_id} not found')
        return quote

    def create_quote(self, client_id, services):
        logger.info('Creating quote for client %s', client_id)
        client = self.client_service.get_client_by_id(client_id)

        errors = validate_services(services)
        if errors:
            raise ValidationError(errors[0], errors)

        quote = Quote.objects.create(
            client=client,
            services=services,
            total_amount=Quote.compute_total(services),
        )
        logger.info('Quote %s created successfully', quote.pk)
        return quote

    def update_quote(self, quote_id, services=None):
        logger.info('Updating quote %s', quote_id)
        quote = self.get_quote_by_id(quote_id)

        if services is not None:
            errors = validate_services(services)
            if errors:
                raise ValidationError(errors[0], errors)
            quote.services = services
            quote.total_amount = Quote.compute_total(services)
            quote.save()

        logger.info('Quote %s updated successfully', quote_id)
        return quote

    def delete_quote(self, quote_id):
        logger.info('Deleting quote %s', quote_id)
        quote = self.get_quote_by_id(quote_id)
        quote.delete()
        logger.info('Quote %s deleted successfully', quote_id)

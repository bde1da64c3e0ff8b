class PaymentGatewayError(Exception):
    """The payment provider could not create or report a transaction."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

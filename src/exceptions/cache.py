from fastapi import HTTPException


class InvalidInvalidationRequestError(HTTPException):
    """Pedido de invalidação com um tipo de entidade desconhecido"""

    def __init__(self, entity_kind=None):
        super().__init__(
            status_code=500,
            detail=f"Tipo de entidade desconhecido para invalidação de cache: {entity_kind}",
        )

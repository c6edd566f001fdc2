from fastapi import HTTPException


class OrderError(HTTPException):
    """Exceção base para erros relacionados aos pedidos"""

    pass


class OrderNotFoundError(OrderError):
    def __init__(self, order_id=None):
        message = (
            "Pedido não encontrado"
            if order_id is None
            else f"Pedido de ID {order_id} não encontrado"
        )
        super().__init__(status_code=404, detail=message)

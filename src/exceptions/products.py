from fastapi import HTTPException


class ProductError(HTTPException):
    """Exceção base para erros relacionados aos produtos"""

    pass


class ProductNotFoundError(ProductError):
    def __init__(self, product_id=None):
        message = (
            "Produto não encontrado"
            if product_id is None
            else f"Produto de ID {product_id} não encontrado"
        )
        super().__init__(status_code=404, detail=message)


class ProductCreationError(ProductError):
    def __init__(self, error: str):
        super().__init__(status_code=500, detail=f"Falha na criação do produto: {error}")


class InsufficientStockError(ProductError):
    def __init__(self, product_name: str):
        super().__init__(
            status_code=400, detail=f"Estoque insuficiente para o produto {product_name}"
        )


class ProductUpdateError(ProductError):
    def __init__(self, error: str):
        super().__init__(status_code=400, detail=f"Falha na atualização do produto: {error}")

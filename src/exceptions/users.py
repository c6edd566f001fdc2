from fastapi import HTTPException


class UserError(HTTPException):
    """Exceção base para erros relacionados aos usuários"""

    pass


class UserNotFoundError(UserError):
    def __init__(self, user_id=None):
        message = (
            "Usuário não encontrado"
            if user_id is None
            else f"Usuário de ID {user_id} não encontrado"
        )
        super().__init__(status_code=400, detail=message)


class UserCreationError(UserError):
    def __init__(self, error: str):
        super().__init__(status_code=400, detail=f"Falha na criação do usuário: {error}")


class UserDeletionError(UserError):
    def __init__(self, user_id: str):
        super().__init__(
            status_code=400,
            detail=f"Usuário de ID {user_id} possui pedidos e não pode ser excluído",
        )

from fastapi import HTTPException


class AuthenticationError(HTTPException):
    def __init__(self, message: str = "Não foi possível validar o usuário"):
        super().__init__(status_code=401, detail=message)


class AdminRequiredError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=403, detail="Usuário não possui privilégios de administrador"
        )

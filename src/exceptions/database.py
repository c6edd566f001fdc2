from fastapi import HTTPException


class DataSourceError(HTTPException):
    """Falha ao consultar ou gravar no banco de documentos"""

    def __init__(self, message: str = "Dados indisponíveis no momento"):
        super().__init__(status_code=503, detail=message)

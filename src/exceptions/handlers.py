"""
Tradução dos erros de validação do pydantic para mensagens em português.

A resposta 422 mantém só ``loc``, ``msg`` e ``type`` de cada erro; o valor
recebido não é devolvido ao cliente.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Chaves entre chaves vêm do ``ctx`` do erro (ou de ``msg``)
MESSAGES = {
    "missing": "Campo obrigatório ausente.",
    "extra_forbidden": "Campo não permitido.",
    "string_type": "O valor fornecido deve ser uma string.",
    "string_too_short": "O texto deve ter pelo menos {min_length} caracteres.",
    "string_too_long": "O texto deve ter no máximo {max_length} caracteres.",
    "int_parsing": "O valor fornecido não é um número inteiro válido.",
    "float_parsing": "O valor fornecido não é um número decimal válido.",
    "decimal_parsing": "O valor fornecido não é um número decimal válido.",
    "decimal_max_places": "O valor deve ter no máximo {decimal_places} casas decimais.",
    "bool_parsing": "O valor fornecido não é um booleano válido.",
    "uuid_parsing": "O valor fornecido não é um UUID válido.",
    "date_from_datetime_parsing": "A data fornecida é inválida. O formato esperado é YYYY-MM-DD.",
    "date_parsing": "A data fornecida é inválida. O formato esperado é YYYY-MM-DD.",
    "datetime_parsing": "O formato de data e hora fornecido é inválido.",
    "greater_than_equal": "O valor deve ser maior ou igual a {ge}.",
    "too_short": "A lista deve conter ao menos um item.",
    "enum": "O valor deve ser um dos seguintes: {expected}.",
    "literal_error": "O valor deve ser um dos seguintes: {expected}.",
    "value_error": "Erro de valor: {msg}",
}


class _ErrorContext(dict):
    def __missing__(self, key):
        return ""


def translate_error(error: dict) -> str:
    msg = error.get("msg", "")
    template = MESSAGES.get(error.get("type", ""))
    if template is None:
        return msg.replace("Input should be", "O valor deve ser")

    context = _ErrorContext(error.get("ctx") or {})
    context["msg"] = msg.removeprefix("Value error, ")
    return template.format_map(context)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "loc": list(error.get("loc", ())),
            "msg": translate_error(error),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Requisição inválida em {request.method} {request.url.path}: "
        f"{[error['type'] for error in errors]}"
    )
    return JSONResponse(status_code=422, content={"detail": errors})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

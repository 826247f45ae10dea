"""API Gateway (Lambda proxy) response builders shared by all handlers."""

import json
from typing import Any

from shortlinks.types import LambdaResponse


# TODO: remove once the frontend is served from the API's domain
CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET,DELETE',
}


def _response(status_code: int, body: Any, headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error_body(base: str, message: str | None, error_code: str | None) -> dict[str, str]:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return body


def response_200(body: Any) -> LambdaResponse:
    return _response(200, body)


def response_201(body: Any) -> LambdaResponse:
    return _response(201, body)


def response_204() -> LambdaResponse:
    return {'statusCode': 204, 'headers': dict(CORS_HEADERS), 'body': ''}


def response_302(*, location: str) -> LambdaResponse:
    return _response(302, {}, headers={'Location': location})  # no body needed for redirects


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(400, _error_body('Bad Request', message, error_code))


def response_401(message: str | None = None) -> LambdaResponse:
    return _response(401, _error_body('Unauthorized', message, None))


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(404, _error_body('Not Found', message, error_code))


def response_405(method: str) -> LambdaResponse:
    return _response(405, _error_body('Method Not Allowed', method, None))


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(409, _error_body('Conflict', message, error_code))


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(500, _error_body('Internal Server Error', message, error_code))


def response_503(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _response(503, _error_body('Service Unavailable', message, error_code))

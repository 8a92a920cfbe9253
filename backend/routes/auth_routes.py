import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.auth.dependencies import extract_token
from backend.core import config
from backend.services.gateway import AuthGateway, GatewayResult, get_gateway

router = APIRouter(tags=['auth'])


async def read_json_body(request: Request):
    """Parsed JSON body, or None when the body is missing or not JSON."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def to_response(result: GatewayResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


def clear_auth_cookies(response: JSONResponse) -> JSONResponse:
    for cookie_name in (config.AUTH_COOKIE_NAME, config.ROLE_COOKIE_NAME):
        response.delete_cookie(
            cookie_name,
            path='/',
            secure=config.COOKIE_SECURE,
            samesite='strict',
        )
    return response


@router.post('/login')
async def login(request: Request, gateway: AuthGateway = Depends(get_gateway)):
    payload = await read_json_body(request)
    return to_response(gateway.login(payload))


@router.post('')
async def register(request: Request, gateway: AuthGateway = Depends(get_gateway)):
    payload = await read_json_body(request)
    return to_response(gateway.register(payload))


@router.get('')
def check_session(request: Request, gateway: AuthGateway = Depends(get_gateway)):
    return to_response(gateway.check_session(extract_token(request)))


@router.put('')
async def update_profile(request: Request, gateway: AuthGateway = Depends(get_gateway)):
    payload = await read_json_body(request)
    return to_response(gateway.update_profile(extract_token(request), payload))


@router.delete('')
def logout(gateway: AuthGateway = Depends(get_gateway)):
    return clear_auth_cookies(to_response(gateway.logout()))


@router.post('/logout')
def logout_post(gateway: AuthGateway = Depends(get_gateway)):
    return clear_auth_cookies(to_response(gateway.logout()))

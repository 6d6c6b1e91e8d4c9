# src/app.py
from datetime import datetime, timezone
from http import HTTPStatus
from socketserver import ThreadingMixIn
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIServer, make_server
import json
import logging
import re
import sys

from src.config import Settings, settings as default_settings
from src.database.database import SessionLocal
from src.repositories.sqlalchemy import (
    SqlalchemyProjectRepository, SqlalchemyTicketRepository, SqlalchemyUserRepository
)
from src.services.auth_service import AuthService
from src.services.project_service import ProjectService
from src.services.ticket_service import TicketService
from src.services.user_service import UserService
from src.services.exceptions import *
from src.utils.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        return json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid or missing JSON body.")

def authorize_and_get_token_data(environ):
    header = environ.get('HTTP_AUTHORIZATION', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise TokenInvalidError("Missing bearer token in 'Authorization' header.")
    return environ['auth'].verify_token(token.strip())

ERROR_MAP = {
    ValidationError: HTTPStatus.BAD_REQUEST,
    TokenInvalidError: HTTPStatus.UNAUTHORIZED,
    AuthenticationError: HTTPStatus.UNAUTHORIZED,
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
    RateLimitExceededError: HTTPStatus.TOO_MANY_REQUESTS,
    InternalError: HTTPStatus.INTERNAL_SERVER_ERROR,
}

def status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"

def error_body(status: HTTPStatus, message: str, **extra) -> str:
    return json.dumps({"error": status.phrase, "message": message, "statusCode": status.value, **extra})

def handle_exception(e, environ, path_args=()):
    """
    예외를 HTTP 상태와 응답 본문으로 변환합니다. 응답 전에 요청 정보와 함께 로그를 남깁니다.
    알 수 없는 예외는 500으로 처리하고, 내부 메시지는 노출하지 않습니다.
    """
    status = next(
        (ERROR_MAP[cls] for cls in type(e).__mro__ if cls in ERROR_MAP),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )
    context = {
        "method": environ.get("REQUEST_METHOD", ""),
        "url": request_url(environ),
        "params": list(path_args),
        "query": parse_qs(environ.get("QUERY_STRING", "")),
    }
    if status == HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s %s", e, context, exc_info=e)
    else:
        logger.warning("Request rejected (%d): %s %s", status.value, e, context)

    extra = {}
    if isinstance(e, TokenInvalidError):
        message = "Authentication is required to access this resource."
    elif isinstance(e, RateLimitExceededError):
        message = str(e)
        extra["retryAfter"] = max(1, round(e.retry_after))
    elif status != HTTPStatus.INTERNAL_SERVER_ERROR or isinstance(e, InternalError):
        message = str(e)
    else:
        message = "Something went wrong"
    return status_line(status), error_body(status, message, **extra)

def request_url(environ):
    query = environ.get("QUERY_STRING", "")
    path = environ.get("PATH_INFO", "")
    return f"{path}?{query}" if query else path

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

ID = r'([^/]+)'

def build_routes(prefix: str):
    table = [
        ('GET', r'/health', health_handler),
        ('POST', r'/register', register_handler),
        ('POST', r'/login', login_handler),
        ('GET', r'/me', me_handler),
        ('GET', r'/users', list_users_handler),
        ('GET', rf'/users/{ID}', get_user_handler),
        ('PUT', rf'/users/{ID}', update_user_handler),
        ('DELETE', rf'/users/{ID}', delete_user_handler),
        ('GET', r'/projects', list_projects_handler),
        ('POST', r'/projects', create_project_handler),
        ('GET', rf'/projects/{ID}/tickets', list_project_tickets_handler),
        ('GET', rf'/projects/{ID}', get_project_handler),
        ('PUT', rf'/projects/{ID}', update_project_handler),
        ('DELETE', rf'/projects/{ID}', delete_project_handler),
        ('GET', r'/tickets', list_tickets_handler),
        ('POST', r'/tickets', create_ticket_handler),
        ('GET', rf'/tickets/{ID}', get_ticket_handler),
        ('PUT', rf'/tickets/{ID}', update_ticket_handler),
        ('DELETE', rf'/tickets/{ID}', delete_ticket_handler),
    ]
    prefix = re.escape(prefix.rstrip('/'))
    return [(method, re.compile(f'^{prefix}{pattern}$'), handler) for method, pattern, handler in table]

def create_app(session_factory=None, settings: Settings = None, rate_limiter: SlidingWindowRateLimiter = None):
    """
    WSGI 애플리케이션을 생성합니다.

    Args:
        session_factory: 요청마다 SQLAlchemy 세션을 만들 팩토리. 기본값은 SessionLocal.
        settings: 애플리케이션 설정. 기본값은 환경 변수에서 읽은 설정.
        rate_limiter: 클라이언트별 요청 제한기. 프로세스 수명 동안 하나를 공유합니다.

    Returns:
        (environ, start_response)를 받는 WSGI 호출 객체.
    """
    session_factory = session_factory or SessionLocal
    settings = settings or default_settings
    if rate_limiter is None:
        rate_limiter = SlidingWindowRateLimiter(settings.rate_limit, settings.rate_limit_window_seconds)
    auth_service = AuthService(settings)
    routes = build_routes(settings.api_prefix)

    def application(environ, start_response):
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "")
        path_args = ()

        limit_info = rate_limiter.hit(environ.get("REMOTE_ADDR") or "unknown")
        try:
            if not limit_info.allowed:
                raise RateLimitExceededError(
                    f"Rate limit exceeded. Maximum {rate_limiter.limit} requests per "
                    f"{rate_limiter.window_seconds:g} second(s).",
                    retry_after=limit_info.retry_after,
                )

            db_session = session_factory()
            try:
                # 1. 의존성 생성 (Repositories -> Services)
                project_repo = SqlalchemyProjectRepository(db_session)
                ticket_repo = SqlalchemyTicketRepository(db_session)
                user_repo = SqlalchemyUserRepository(db_session)

                # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
                environ['services'] = {
                    'projects': ProjectService(project_repo, ticket_repo, user_repo),
                    'tickets': TicketService(ticket_repo, project_repo, user_repo),
                    'users': UserService(user_repo, ticket_repo, project_repo),
                }
                environ['auth'] = auth_service

                # 3. 라우팅 및 핸들러 실행
                handler = None
                for route_method, pattern, route_handler in routes:
                    if method == route_method and (match := pattern.match(path)):
                        handler, path_args = route_handler, match.groups()
                        break

                if handler:
                    status, response_body = handler(environ, *path_args)
                else:
                    status = status_line(HTTPStatus.NOT_FOUND)
                    response_body = error_body(HTTPStatus.NOT_FOUND, f"Route {method}:{path} not found")
            finally:
                db_session.close()

        except Exception as e:
            status, response_body = handle_exception(e, environ, path_args)

        headers = list(limit_info.to_headers().items())
        if response_body:
            headers.append(("Content-Type", "application/json"))
        start_response(status, headers)
        return [response_body.encode("utf-8")] if response_body else []

    return application

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

NO_CONTENT = status_line(HTTPStatus.NO_CONTENT)

def health_handler(environ, *args):
    return '200 OK', json.dumps({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

def register_handler(environ, *args):
    user = environ['services']['users'].create_user(get_request_data(environ))
    return '201 Created', json.dumps(user)

def login_handler(environ, *args):
    user = environ['services']['users'].authenticate(get_request_data(environ))
    token = environ['auth'].issue_token(user['_id'], user['email'])
    return '200 OK', json.dumps({"token": token})

def me_handler(environ, *args):
    token_data = authorize_and_get_token_data(environ)
    user = environ['services']['users'].get_user(token_data['_id'])
    return '200 OK', json.dumps(user)

def list_users_handler(environ, *args):
    return '200 OK', json.dumps(environ['services']['users'].list_users())

def get_user_handler(environ, user_id):
    return '200 OK', json.dumps(environ['services']['users'].get_user(user_id))

def update_user_handler(environ, user_id):
    authorize_and_get_token_data(environ)
    user = environ['services']['users'].update_user(user_id, get_request_data(environ))
    return '200 OK', json.dumps(user)

def delete_user_handler(environ, user_id):
    authorize_and_get_token_data(environ)
    environ['services']['users'].delete_user(user_id)
    return NO_CONTENT, ''

def list_projects_handler(environ, *args):
    return '200 OK', json.dumps(environ['services']['projects'].list_projects())

def get_project_handler(environ, project_id):
    return '200 OK', json.dumps(environ['services']['projects'].get_project(project_id))

def create_project_handler(environ, *args):
    authorize_and_get_token_data(environ)
    project = environ['services']['projects'].create_project(get_request_data(environ))
    return '201 Created', json.dumps(project)

def update_project_handler(environ, project_id):
    authorize_and_get_token_data(environ)
    project = environ['services']['projects'].update_project(project_id, get_request_data(environ))
    return '200 OK', json.dumps(project)

def delete_project_handler(environ, project_id):
    authorize_and_get_token_data(environ)
    environ['services']['projects'].delete_project(project_id)
    return NO_CONTENT, ''

def list_tickets_handler(environ, *args):
    return '200 OK', json.dumps(environ['services']['tickets'].list_tickets())

def list_project_tickets_handler(environ, project_id):
    return '200 OK', json.dumps(environ['services']['tickets'].list_project_tickets(project_id))

def get_ticket_handler(environ, ticket_id):
    return '200 OK', json.dumps(environ['services']['tickets'].get_ticket(ticket_id))

def create_ticket_handler(environ, *args):
    authorize_and_get_token_data(environ)
    ticket = environ['services']['tickets'].create_ticket(get_request_data(environ))
    return '201 Created', json.dumps(ticket)

def update_ticket_handler(environ, ticket_id):
    authorize_and_get_token_data(environ)
    ticket = environ['services']['tickets'].update_ticket(ticket_id, get_request_data(environ))
    return '200 OK', json.dumps(ticket)

def delete_ticket_handler(environ, ticket_id):
    authorize_and_get_token_data(environ)
    environ['services']['tickets'].delete_ticket(ticket_id)
    return NO_CONTENT, ''

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """요청마다 스레드를 띄워 여러 요청을 동시에 처리합니다."""
    daemon_threads = True

def main():
    from src.database.db_init import initialize_db
    from src.utils.logging_config import setup_logging

    setup_logging(default_settings.log_level, default_settings.log_file or None)
    initialize_db()
    app = create_app()
    try:
        with make_server(default_settings.host, default_settings.port, app, server_class=ThreadingWSGIServer) as httpd:
            logger.info("Serving ticket tracker on %s:%d...", default_settings.host, default_settings.port)
            httpd.serve_forever()
    except Exception as e:
        logger.error("Error starting server: %s", e)
        sys.exit(1)

if __name__ == "__main__":
    main()

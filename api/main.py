"""
FastAPI application for the Company Registry API.

Routes:
    GET    /alive                 liveness probe, no auth
    POST   /api/v1/company        create (writer)
    PATCH  /api/v1/company/{id}   partial update (writer)
    DELETE /api/v1/company/{id}   delete (writer)
    GET    /api/v1/company/{id}   fetch (reader)

Every classified failure is rendered as {"error": "<message>"}. Validation
runs in a fixed order and stops at the first failing check, so the message
a client sees for a request with several bad fields is stable.
"""

import json
import logging
import sys
import uuid
from typing import Any, Callable, Optional

import pydantic
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from auth import JWTAuth, TokenAuthority
from database import CompanyStore, DatabaseManager
from errors import AuthError, ErrorMessage, NotificationError, ServiceError, ValidationError
from models import (
    DESCRIPTION_MAX_LENGTH,
    LEGAL_TYPES,
    NAME_MAX_LENGTH,
    Company,
    CompanyDraft,
    CompanyEvent,
    CompanyPatch,
    EventKind,
    LegalType,
    Role,
)
from notifier import EventNotifier, KafkaNotifier
from utils import log

from .config import Settings
from .models import CompanyCreateRequest, CompanyResponse, CompanyUpdateRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------------------------------------------------
# Dependencies
# ----------------------------------------------------------------

def get_store(request: Request) -> CompanyStore:
    return request.app.state.store


def get_notifier(request: Request) -> EventNotifier:
    return request.app.state.notifier


def require_role(role: Role) -> Callable[[Request], None]:
    """
    Build a dependency that rejects the request unless it carries
    'Authorization: Bearer <token>' with the given role.
    """
    def check_role(request: Request) -> None:
        parts = request.headers.get("Authorization", "").split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            logger.error("Authorization header is invalid")
            raise AuthError(ErrorMessage.JWT_INVALID)

        token_authority: TokenAuthority = request.app.state.auth
        try:
            has_role = token_authority.has_role(parts[1], role.value)
        except AuthError as e:
            logger.error(f"Authorization check failed: {e}")
            raise AuthError(ErrorMessage.JWT_INVALID, e.detail) from e

        if not has_role:
            logger.error(f"Access denied: token lacks role '{role.value}'")
            raise AuthError(ErrorMessage.JWT_ROLE_MISSING)

    return check_role


def company_id_param(company_id: str) -> str:
    """Parse the {id} path parameter as a UUID."""
    try:
        return str(uuid.UUID(company_id))
    except ValueError as e:
        logger.error(f"Invalid id {company_id!r}: {e}")
        raise ValidationError(ErrorMessage.INVALID_ID, str(e)) from e


async def json_body(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.error(f"Request body is not valid JSON: {e}")
        raise ValidationError(ErrorMessage.INVALID_REQUEST, str(e)) from e


# ----------------------------------------------------------------
# Validation
# ----------------------------------------------------------------

def parse_request(model: type[pydantic.BaseModel], body: Any) -> Any:
    # a JSON null body decodes to an empty request
    if body is None:
        body = {}
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as e:
        logger.error(f"Invalid {model.__name__}: {e.error_count()} error(s)")
        raise ValidationError(ErrorMessage.INVALID_REQUEST, str(e)) from e


def validate_fields(
    name: Optional[str],
    description: Optional[str],
    legal_type: Optional[str],
) -> None:
    """
    Check name, then description, then legal type. None skips a check.
    Raises ValidationError for the first field that fails.
    """
    if name is not None and (name == "" or len(name) > NAME_MAX_LENGTH):
        logger.error(f"Invalid name: {name!r}")
        raise ValidationError(ErrorMessage.INVALID_NAME)

    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        logger.error(f"Invalid description: {len(description)} characters")
        raise ValidationError(ErrorMessage.INVALID_DESCRIPTION)

    if legal_type is not None and legal_type not in LEGAL_TYPES:
        logger.error(f"Invalid type: {legal_type!r}")
        raise ValidationError(ErrorMessage.INVALID_TYPE)


def notify(notifier: EventNotifier, company_id: str, kind: EventKind) -> None:
    """Publish a change event; failures are logged and never reach the client."""
    try:
        notifier.send(CompanyEvent(id=company_id, event=kind))
    except NotificationError as e:
        logger.error(f"Notification send failed ({kind.value} {company_id}): {e}")
    except Exception:
        logger.exception(f"Unexpected notifier failure ({kind.value} {company_id})")


# ----------------------------------------------------------------
# Health
# ----------------------------------------------------------------

@router.get("/alive", response_class=PlainTextResponse, tags=["Health"])
def alive():
    return "ok"


# ----------------------------------------------------------------
# Company Endpoints
# ----------------------------------------------------------------

@router.post(
    Settings.API_PREFIX + "/company",
    status_code=201,
    response_model=CompanyResponse,
    dependencies=[Depends(require_role(Role.WRITER))],
    tags=["Companies"],
)
def create_company(
    body: Any = Depends(json_body),
    store: CompanyStore = Depends(get_store),
    notifier: EventNotifier = Depends(get_notifier),
):
    """
    Create a company.

    Returns the stored company including its generated id.
    """
    req = parse_request(CompanyCreateRequest, body)
    validate_fields(req.name, req.description, req.type)

    draft = CompanyDraft(
        name=req.name,
        description=req.description,
        employee_count=req.employee_count,
        is_registered=req.is_registered,
        legal_type=LegalType(req.type),
    )
    try:
        company_id = store.create_company(draft)
    except ServiceError as e:
        logger.error(f"DB create request failed: {e}")
        raise

    notify(notifier, company_id, EventKind.CREATED)

    company = Company(id=company_id, **draft.model_dump())
    return JSONResponse(status_code=201, content=CompanyResponse.from_company(company).to_json())


@router.patch(
    Settings.API_PREFIX + "/company/{company_id}",
    dependencies=[Depends(require_role(Role.WRITER))],
    tags=["Companies"],
)
def update_company(
    company_id: str = Depends(company_id_param),
    body: Any = Depends(json_body),
    store: CompanyStore = Depends(get_store),
    notifier: EventNotifier = Depends(get_notifier),
):
    """
    Partially update a company. Fields that are absent (or null) keep
    their stored value.
    """
    req = parse_request(CompanyUpdateRequest, body)
    if req.is_empty():
        logger.error(f"Empty update request for {company_id}")
        raise ValidationError(ErrorMessage.NOTHING_TO_DO)

    validate_fields(req.name, req.description, req.type)

    patch = CompanyPatch(
        name=req.name,
        description=req.description,
        employee_count=req.employee_count,
        is_registered=req.is_registered,
        legal_type=LegalType(req.type) if req.type is not None else None,
    )
    try:
        store.update_company(company_id, patch)
    except ServiceError as e:
        logger.error(f"DB update request failed (id={company_id}): {e}")
        raise

    notify(notifier, company_id, EventKind.UPDATED)
    return Response(status_code=200)


@router.delete(
    Settings.API_PREFIX + "/company/{company_id}",
    dependencies=[Depends(require_role(Role.WRITER))],
    tags=["Companies"],
)
def delete_company(
    company_id: str = Depends(company_id_param),
    store: CompanyStore = Depends(get_store),
    notifier: EventNotifier = Depends(get_notifier),
):
    try:
        store.delete_company(company_id)
    except ServiceError as e:
        logger.error(f"DB delete request failed (id={company_id}): {e}")
        raise

    notify(notifier, company_id, EventKind.DELETED)
    return Response(status_code=200)


@router.get(
    Settings.API_PREFIX + "/company/{company_id}",
    response_model=CompanyResponse,
    dependencies=[Depends(require_role(Role.READER))],
    tags=["Companies"],
)
def get_company(
    company_id: str = Depends(company_id_param),
    store: CompanyStore = Depends(get_store),
):
    """
    Get a company by id.

    The description key is omitted when the stored description is empty.
    """
    try:
        company = store.get_company(company_id)
    except ServiceError as e:
        logger.error(f"DB select request failed (id={company_id}): {e}")
        raise

    return JSONResponse(content=CompanyResponse.from_company(company).to_json())


# ----------------------------------------------------------------
# Application
# ----------------------------------------------------------------

async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message.value).model_dump(),
    )


def create_app(
    store: CompanyStore,
    auth: TokenAuthority,
    notifier: EventNotifier,
) -> FastAPI:
    """Build the FastAPI app around the given collaborators."""
    app = FastAPI(
        title=Settings.API_TITLE,
        description=Settings.API_DESCRIPTION,
        version=Settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=Settings.CORS_METHODS,
        allow_headers=Settings.CORS_HEADERS,
        expose_headers=Settings.CORS_EXPOSE_HEADERS,
    )
    app.add_exception_handler(ServiceError, service_error_handler)

    app.state.store = store
    app.state.auth = auth
    app.state.notifier = notifier

    app.include_router(router)
    return app


def main():
    settings = Settings()
    log.setup_verbose_logging(log_file=settings.LOG_FILE or None)

    try:
        settings.validate()
        auth = JWTAuth(settings.JWT_KEY)
    except ValueError as e:
        logger.critical(str(e))
        sys.exit(1)

    try:
        store = DatabaseManager(settings.DB_DSN)
    except Exception as e:
        logger.critical(f"DB connect failed: {e}")
        sys.exit(1)
    logger.info(f"Connected to database: {settings.DB_DSN}")

    try:
        notifier = KafkaNotifier(settings.KAFKA_HOST, settings.KAFKA_TOPIC)
    except Exception as e:
        logger.critical(f"Kafka setup failed: {e}")
        store.close()
        sys.exit(1)

    app = create_app(store, auth, notifier)
    try:
        uvicorn.run(
            app,
            host=settings.HOST,
            port=settings.PORT,
            log_level="info"
        )
    finally:
        notifier.close()
        store.close()
        logger.info("Database connection and Kafka producer closed")


if __name__ == "__main__":
    main()

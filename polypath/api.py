import logging
import traceback
from typing import Iterator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import PolypathError
from .llm import CompletionClient
from .monitoring import configure_logging
from .schema import ErrorResponse, GenerateWordsRequest, WordsResponse
from .words import Completer, generate_words, validate_request

configure_logging()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

WORDS_PATH = "/generate-words"
# Serverless-style path kept for older clients
LEGACY_WORDS_PATH = "/.netlify/functions/getWords"

app = FastAPI(title="Polypath Words API")


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def _error(status_code: int, message: str, details: str = None) -> JSONResponse:
    body = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(PolypathError)
async def polypath_error_handler(request: Request, exc: PolypathError):
    if exc.status_code < 500:
        logger.info("[WordsAPI] Rejected request: %s", exc.message)
        return _error(exc.status_code, exc.message)
    logger.error("[WordsAPI] Function error: %s", exc.message, exc_info=exc)
    details = None
    if get_settings().is_development:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return _error(exc.status_code, f"Failed to generate words: {exc.message}", details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("[WordsAPI] Malformed request body: %s", exc.errors())
    return _error(400, "Invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return _error(405, "Method not allowed")
    return _error(exc.status_code, str(exc.detail))


def validated_request(
    req: GenerateWordsRequest,
    settings: Settings = Depends(get_settings),
) -> GenerateWordsRequest:
    logger.info("[WordsAPI] Raw request: %s", req.model_dump())
    return validate_request(req, settings)


def get_completion_client(settings: Settings = Depends(get_settings)) -> Iterator[Completer]:
    client = CompletionClient.from_settings(settings)
    try:
        yield client
    finally:
        client.close()


@app.options(WORDS_PATH)
@app.options(LEGACY_WORDS_PATH)
def words_preflight():
    return Response(status_code=200)


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    405: {"model": ErrorResponse, "description": "Method not allowed"},
    500: {"model": ErrorResponse, "description": "Generation failed"},
}


@app.post(WORDS_PATH, response_model=WordsResponse, responses=ERROR_RESPONSES)
@app.post(LEGACY_WORDS_PATH, response_model=WordsResponse, responses=ERROR_RESPONSES,
          include_in_schema=False)
def post_generate_words(
    req: GenerateWordsRequest = Depends(validated_request),
    client: Completer = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
):
    try:
        return generate_words(req, client, settings)
    except PolypathError:
        raise
    except Exception as e:
        # Anything unexpected still answers with a JSON error body
        raise PolypathError("unexpected error") from e

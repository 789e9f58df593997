from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

import config
from app.errors import ErrorKind, Result, error_response
from app.models import FileListOut
from app.services.storage_manager import StorageManager
from logger_config import setup_logger

# Logger setup
logger = setup_logger()

ENDPOINTS = [
    "  POST   /upload            - Upload a file (requires 'filename' header)",
    "  GET    /files             - List all files",
    "  GET    /get/{filename}    - Download a file",
    "  DELETE /delete/{filename} - Delete a file",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage root is fixed for the lifetime of the process
    storage_manager = StorageManager(Path(config.STORAGE_DIR))
    storage_manager.initialize()
    app.state.storage_manager = storage_manager

    logger.info(f"Server started at http://{config.HOST}:{config.PORT}")
    logger.info("Available endpoints:")
    for endpoint in ENDPOINTS:
        logger.info(endpoint)
    yield


app = FastAPI(title="File Store", lifespan=lifespan)


def get_storage_manager(request: Request) -> StorageManager:
    return request.app.state.storage_manager


def content_disposition(filename: str) -> str:
    """Build the attachment header, or a bare ``attachment`` if the name isn't header-safe."""
    value = f'attachment; filename="{filename}"'
    if '"' in filename or not all(c == "\t" or " " <= c <= "~" for c in value):
        return "attachment"
    return value


async def read_body(request: Request) -> Result[bytearray]:
    """Buffer the request body, enforcing config.MAX_LENGTH."""
    max_length = config.MAX_LENGTH

    content_length = request.headers.get("content-length")
    if content_length is not None:
        try:
            declared_length = int(content_length)
        except ValueError:
            return Result.failure(ErrorKind.INVALID_BODY)
        if declared_length < 0:
            return Result.failure(ErrorKind.INVALID_BODY)
        if declared_length > max_length:
            logger.debug(f"Declared Content-Length {declared_length} exceeds {max_length}")
            return Result.failure(ErrorKind.PAYLOAD_TOO_LARGE)

    body = bytearray()
    try:
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > max_length:
                return Result.failure(ErrorKind.PAYLOAD_TOO_LARGE)
    except ClientDisconnect:
        logger.warning("Client disconnected while sending the request body")
        return Result.failure(ErrorKind.INVALID_BODY)

    return Result.success(body)


@app.post("/upload", response_class=PlainTextResponse)
async def upload_file(
    request: Request,
    filename: Optional[str] = Header(None),
    storage_manager: StorageManager = Depends(get_storage_manager),
):
    """Store the request body under the name given in the ``filename`` header."""
    if filename is None:
        return error_response(ErrorKind.MISSING_HEADER)

    logger.info(f"Receiving upload request for file: {filename}")

    body = await read_body(request)
    if body.failed:
        return error_response(body.error)

    logger.debug(f"Body size: {len(body.value)} bytes")

    saved = await storage_manager.save_file(filename, body.value)
    if saved.failed:
        return error_response(saved.error)

    return PlainTextResponse(f"Successfully uploaded: {filename}")


@app.get("/files", response_model=FileListOut)
async def list_files(storage_manager: StorageManager = Depends(get_storage_manager)):
    """List the names of all stored files."""
    logger.info("Receiving list request")

    listing = await storage_manager.list_files()
    if listing.failed:
        return error_response(listing.error)

    return FileListOut(files=listing.value)


@app.get("/get/{filename}")
async def download_file(filename: str, storage_manager: StorageManager = Depends(get_storage_manager)):
    """Return the stored file as an attachment."""
    logger.info(f"Receiving download request for file: {filename}")

    contents = await storage_manager.read_file(filename)
    if contents.failed:
        return error_response(contents.error)

    if contents.value is None:
        return PlainTextResponse(f"File '{filename}' not found", status_code=status.HTTP_404_NOT_FOUND)

    return Response(
        content=contents.value,
        media_type="application/octet-stream",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@app.delete("/delete/{filename}", response_class=PlainTextResponse)
async def delete_file(filename: str, storage_manager: StorageManager = Depends(get_storage_manager)):
    """Delete a stored file."""
    logger.info(f"Receiving delete request for file: {filename}")

    deleted = await storage_manager.delete_file(filename)
    if deleted.failed:
        return error_response(deleted.error)

    if not deleted.value:
        return PlainTextResponse(f"File '{filename}' not found", status_code=status.HTTP_404_NOT_FOUND)

    logger.info(f"Successfully deleted file: {filename}")
    return PlainTextResponse(f"File '{filename}' deleted successfully")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    # Unknown path, or known path with the wrong method
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(ErrorKind.ROUTE_NOT_MATCHED)
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return error_response(ErrorKind.UNHANDLED)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.debug(f"Request validation failed on {request.method} {request.url.path}: {exc.errors()}")
    return error_response(ErrorKind.INVALID_BODY)


async def handle_broad_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(ErrorKind.UNHANDLED)


# CORS is added last so it wraps error responses too
app.middleware("http")(handle_broad_exceptions)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    logger.info("Starting file store server...")
    logger.info(f"Storage directory: {config.STORAGE_DIR}")
    logger.info(f"Maximum upload size: {config.MAX_LENGTH / (1024*1024):.2f} MB")
    uvicorn.run(app, host=config.HOST, port=config.PORT)

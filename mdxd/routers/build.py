"""Thin HTTP wrapper around mdx_library builds.

Architecture: This router contains ONLY HTTP handling.
Build logic is in mdx_library; request defaults are in BuildService.
"""

import logging
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException

from mdx_library import ConfigurationError
from mdx_library import MDXBuildError

from ..dependencies import get_build_service
from ..models import BuildRequest
from ..models import BuildResponse
from ..models import DiagnosticResponse
from ..models import FileBuildRequest
from ..services import BuildOutcome
from ..services import BuildService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/build", tags=["build"])


def _to_response(outcome: BuildOutcome) -> BuildResponse:
    return BuildResponse(
        code=outcome.file.value,
        path=outcome.file.path,
        format=outcome.format,
        group=outcome.group,
        config_hash=outcome.config_hash,
        frontmatter=outcome.frontmatter,
        dependencies=outcome.dependencies,
        messages=[
            DiagnosticResponse(
                reason=message.reason,
                severity=message.severity,
                line=message.line,
                source=message.source,
            )
            for message in outcome.file.messages
        ],
    )


def _build_error(exc: MDXBuildError) -> HTTPException:
    # Bad options are the caller's fault; anything else is a problem with the document
    status_code = 400 if isinstance(exc, ConfigurationError) else 422
    return HTTPException(status_code=status_code, detail=str(exc))


@router.post("", response_model=BuildResponse)
async def build_source(
    request: BuildRequest,
    service: Annotated[BuildService, Depends(get_build_service)],
) -> BuildResponse:
    """Compile document source text."""
    try:
        outcome = await service.build_source(request)
    except MDXBuildError as exc:
        logger.warning(f"Build failed for {request.file_path or '<source>'}: {exc}")
        raise _build_error(exc) from exc
    except Exception as exc:
        logger.error(f"Unexpected build failure for {request.file_path or '<source>'}: {exc}")
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return _to_response(outcome)


@router.post("/file", response_model=BuildResponse)
async def build_file(
    request: FileBuildRequest,
    service: Annotated[BuildService, Depends(get_build_service)],
) -> BuildResponse:
    """Compile a document read from disk."""
    try:
        outcome = await service.build_file(request)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Document not found: {request.path}") from exc
    except MDXBuildError as exc:
        logger.warning(f"Build failed for {request.path}: {exc}")
        raise _build_error(exc) from exc
    except Exception as exc:
        logger.error(f"Unexpected build failure for {request.path}: {exc}")
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return _to_response(outcome)
